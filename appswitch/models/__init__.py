"""Data models for appswitch."""

from .process import ProcessHandle, ProcessRecord, UNKNOWN_OSTYPE, ostype_to_str
from .request import (
    AllCriterion,
    AppAction,
    BundleIDCriterion,
    CreatorCriterion,
    FinalAction,
    FrontCriterion,
    GlobalAction,
    MatchCriterion,
    NameCriterion,
    PathCriterion,
    PidCriterion,
    Request,
)

__all__ = [
    "ProcessHandle",
    "ProcessRecord",
    "UNKNOWN_OSTYPE",
    "ostype_to_str",
    "MatchCriterion",
    "FrontCriterion",
    "AllCriterion",
    "CreatorCriterion",
    "BundleIDCriterion",
    "NameCriterion",
    "PidCriterion",
    "PathCriterion",
    "AppAction",
    "GlobalAction",
    "FinalAction",
    "Request",
]
