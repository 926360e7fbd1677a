"""Model package exports."""

from models.comprehensive import COMPREHENSIVE_ELEMENT_KEYS, ComprehensiveProfile
from models.look import Look, LookPage, parse_look_data
from models.style_profile import StyleProfileData
from models.style_report import ByItemsView, ItemSummary, LookView, ReportSection, StyleReportData

__all__ = [
    "COMPREHENSIVE_ELEMENT_KEYS",
    "ByItemsView",
    "ComprehensiveProfile",
    "ItemSummary",
    "Look",
    "LookPage",
    "LookView",
    "ReportSection",
    "StyleProfileData",
    "StyleReportData",
    "parse_look_data",
]
