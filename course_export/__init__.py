"""
Course archive export - platform-agnostic core.
Used by the web API, the scheduled export job and operator scripts.
"""

# Database (SQLAlchemy)
from .database import get_connection, get_transaction, get_engine, close_engine, is_configured, check_database

# Configuration and time
from .config import ExportConfig, get_export_config, LINK_EXPIRY_SECONDS
from .clock import Clock, SystemClock, FixedClock

# Course structure and restrictions
from .availability import ConditionTree, Condition, parse_availability, is_available_for_all
from .structure import (
    CourseRef, SectionInfo, ModuleInfo, CourseStructure,
    StructureLookupError, CourseNotFoundError, SectionNotFoundError, CourseModuleNotFoundError,
)
from .restrictions import is_restricted

# Collaborators
from .provider import CourseProvider, DatabaseCourseProvider
from .renderer import DocumentRenderer, DatabaseDocumentRenderer, DocumentNotFoundError
from .storage import ArchiveStore, DatabaseArchiveStore, StoredArchive

# Download tokens
from .tokens import (
    DownloadTokens, DownloadTokenError, TokenFailure, TokenData,
    AdminDirectory, DatabaseAdminDirectory, parse_download_token,
)

__all__ = [
    # Database
    'get_connection', 'get_transaction', 'get_engine', 'close_engine', 'is_configured',
    'check_database',
    # Config
    'ExportConfig', 'get_export_config', 'LINK_EXPIRY_SECONDS',
    'Clock', 'SystemClock', 'FixedClock',
    # Structure
    'ConditionTree', 'Condition', 'parse_availability', 'is_available_for_all',
    'CourseRef', 'SectionInfo', 'ModuleInfo', 'CourseStructure',
    'StructureLookupError', 'CourseNotFoundError', 'SectionNotFoundError',
    'CourseModuleNotFoundError',
    'is_restricted',
    # Collaborators
    'CourseProvider', 'DatabaseCourseProvider',
    'DocumentRenderer', 'DatabaseDocumentRenderer', 'DocumentNotFoundError',
    'ArchiveStore', 'DatabaseArchiveStore', 'StoredArchive',
    # Tokens
    'DownloadTokens', 'DownloadTokenError', 'TokenFailure', 'TokenData',
    'AdminDirectory', 'DatabaseAdminDirectory', 'parse_download_token',
]
