"""
Audit definition models.

This module defines the JSON schema of audit definition files and the
conversion into the runtime domain model.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dataaudit.domain.models import (
    DEFAULT_PROVIDER,
    Audit,
    AuditCollection,
    AuditTest,
    CommandType,
    ThresholdOperator,
)
from dataaudit.domain.report_template import TemplateName


class AuditTestDefinition(BaseModel):
    """Definition of one test inside an audit."""

    model_config = ConfigDict(extra="forbid")

    criteria: str = Field(default="", description="Free text, TODAY or COUNTROWS")
    column_name: str = Field(default="", description="Column used by the TODAY criteria")
    operator: str = Field(default=">", description="Threshold operator: >, >=, =>, <, <=, =<, =")
    row_count: int = Field(default=0, ge=0, description="Row-count threshold for COUNTROWS")
    where_clause: str = Field(default="", description="Stored where-clause")
    test_returned_rows: bool = Field(default=False, description="Expect rows (True) or none (False)")
    fail_if_condition_is_true: bool = Field(default=False, description="Fail when no result set is returned")
    send_report: bool = Field(default=False, description="Send a report even when the test passes")
    instructions: str = Field(default="", description="Comments included in notifications")
    template_color_scheme: str = Field(default="Default", description="Report template name")
    use_criteria: bool = Field(default=False, description="Append a WHERE clause to the base statement")

    @field_validator('operator')
    @classmethod
    def validate_operator(cls, v: str) -> str:
        """Validate the operator symbol."""
        return ThresholdOperator.parse(v).value

    @field_validator('template_color_scheme')
    @classmethod
    def validate_template(cls, v: str) -> str:
        """Validate the template name."""
        return TemplateName.parse(v).value

    def to_domain(self) -> AuditTest:
        return AuditTest(
            criteria=self.criteria,
            column_name=self.column_name,
            operator=ThresholdOperator.parse(self.operator),
            row_count=self.row_count,
            where_clause=self.where_clause,
            test_returned_rows=self.test_returned_rows,
            fail_if_condition_is_true=self.fail_if_condition_is_true,
            send_report=self.send_report,
            instructions=self.instructions,
            template_color_scheme=TemplateName.parse(self.template_color_scheme),
            use_criteria=self.use_criteria,
        )


class AuditDefinition(BaseModel):
    """Definition of one audit."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Audit name")
    connection_string: str = Field(..., description="Semicolon separated key=value pairs")
    provider: str = Field(default=DEFAULT_PROVIDER, description="Database provider identifier")
    test_server: str = Field(default="", description="Server label shown in notifications")
    sql_statement: str = Field(..., description="Base SQL statement or procedure name")
    order_by_clause: Optional[str] = Field(None, description="ORDER BY appended after criteria")
    sql_type: CommandType = Field(default=CommandType.TEXT, description="text or stored_procedure")
    tests: List[AuditTestDefinition] = Field(default_factory=list, description="Ordered tests")
    email_subscribers: List[str] = Field(default_factory=list, description="Notification recipients")
    show_query_message: bool = Field(default=True)
    show_threshold_message: bool = Field(default=True)
    include_data_in_email: bool = Field(default=False)
    email_subject: Optional[str] = Field(None, description="Custom notification subject")

    @field_validator('name', 'sql_statement')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Validate required text is not blank."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator('provider')
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Provider identifiers are matched in lower case."""
        return v.strip().lower()

    def to_domain(self) -> Audit:
        return Audit(
            name=self.name,
            connection_string=self.connection_string,
            provider=self.provider,
            test_server=self.test_server,
            sql_statement=self.sql_statement,
            order_by_clause=self.order_by_clause,
            sql_type=self.sql_type,
            tests=[test.to_domain() for test in self.tests],
            email_subscribers=list(self.email_subscribers),
            show_query_message=self.show_query_message,
            show_threshold_message=self.show_threshold_message,
            include_data_in_email=self.include_data_in_email,
            email_subject=self.email_subject,
        )


class AuditFile(BaseModel):
    """Root of an audit definition file."""

    audits: List[AuditDefinition] = Field(default_factory=list, description="Audits in execution order")

    def to_collection(self) -> AuditCollection:
        return AuditCollection([definition.to_domain() for definition in self.audits])
