"""
Models package - pydantic row models
"""
from models.employee import EmployeeContact, EmployeeData

__all__ = [
    'EmployeeContact',
    'EmployeeData',
]
