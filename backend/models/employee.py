"""
Row models for employee_data and employee_contacts.

Rows come out of the store with snake_case column names; the API speaks
camelCase. Both models accept either form and always dump camelCase.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RowModel(BaseModel):
    """Base model for table rows."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both column name and API name
        extra='ignore',
    )

    @classmethod
    def from_row(cls, row: Dict[str, Any]):
        return cls.model_validate(row)

    def to_api(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class EmployeeContact(RowModel):
    """One row of employee_contacts."""

    contact_id: str
    contact_name: str
    contact_phone: str
    contact_relation: str


class EmployeeData(RowModel):
    """One row of employee_data."""

    employee_id: str
    employee_name: str
    employee_title: str
    employee_phone: str
    employee_mail: str
    employee_address_street: str
    employee_address_city: str
    employee_address_state: str
    primary_alternate_contact_id: Optional[str] = None
    secondary_alternate_contact_id: Optional[str] = None

    def to_details(
        self,
        primary_contact: Optional[EmployeeContact],
        secondary_contact: Optional[EmployeeContact],
    ) -> Dict[str, Any]:
        """
        Employee details payload: contact ids replaced by the resolved contacts.
        """
        details = self.model_dump(
            by_alias=True,
            exclude={'primary_alternate_contact_id', 'secondary_alternate_contact_id'},
        )
        details['primaryContact'] = primary_contact.to_api() if primary_contact else None
        details['secondaryContact'] = secondary_contact.to_api() if secondary_contact else None
        return details
