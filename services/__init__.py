"""Services package."""

from services.org_chart_service import OrgChartBuilder, role_label

__all__ = ["OrgChartBuilder", "role_label"]
