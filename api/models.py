"""
Pydantic response models for the navigation API.

Optional fields default to None: a program without a matching report has no
link, and upstream records may lack a name or code.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Menu models ───────────────────────────────────────────────────────────────

class MenuLinkOut(BaseModel):
    """A program entry in a customer's side menu."""
    label: str = Field(..., description="Report name (masked when masking is on)", examples=["Acme 2023"])
    href: str | None = Field(None, description="Report hyperlink; null when no report has this name")


class MenuCustomerOut(BaseModel):
    label: str = Field(..., description="Customer name", examples=["Acme Inc"])
    links: list[MenuLinkOut] = Field(default_factory=list)


class MenuGroupOut(BaseModel):
    """One navbar dropdown for customers whose names start in [low, high]."""
    label: str = Field(..., examples=["A-D"])
    low: str = Field(..., examples=["A"])
    high: str = Field(..., examples=["D"])
    customers: list[MenuCustomerOut] = Field(default_factory=list)


class StaticMenuItemOut(BaseModel):
    label: str
    href: str | None = None
    children: list[MenuLinkOut] = Field(default_factory=list)


class NavigationMenuOut(BaseModel):
    groups: list[MenuGroupOut] = Field(default_factory=list)
    static_items: list[StaticMenuItemOut] = Field(default_factory=list)


# ── Diagnostic and summary models ─────────────────────────────────────────────

class DiagnosticOut(BaseModel):
    """Programs that still need a report."""
    missing: list[str] = Field(default_factory=list, examples=[["Acme 2024: Make/Edit Report"]])
    count: int = Field(..., description="Number of active programs without a matching report", examples=[1])
    summary: str = Field(..., examples=["Number of Missing Reports: 1"])


class ProgramLinkOut(BaseModel):
    report_name: str = Field(..., examples=["Acme 2023"])
    report_link: str | None = None


class CustomerSummaryOut(BaseModel):
    customer_name: str | None = Field(None, examples=["Acme Inc"])
    customer_code: str | None = Field(None, examples=["C1"])
    programs: list[ProgramLinkOut] = Field(default_factory=list)
    program_count: int = Field(..., examples=[1])


class NavigationOut(BaseModel):
    menu: NavigationMenuOut
    diagnostic: DiagnosticOut
    summaries: list[CustomerSummaryOut] = Field(default_factory=list)


class ErrorOut(BaseModel):
    error: str
    detail: str
    status_code: int
