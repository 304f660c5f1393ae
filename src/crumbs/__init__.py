from .models import Breadcrumb, BreadcrumbFile
from .storage import (
    BreadcrumbError,
    BreadcrumbNotFoundError,
    BreadcrumbStore,
    DuplicateBreadcrumbError,
    StoreExistsError,
    StoreFormatError,
    StoreNotFoundError,
    find_store_path,
    generate_id,
)

__all__ = [
    "Breadcrumb",
    "BreadcrumbError",
    "BreadcrumbFile",
    "BreadcrumbNotFoundError",
    "BreadcrumbStore",
    "DuplicateBreadcrumbError",
    "StoreExistsError",
    "StoreFormatError",
    "StoreNotFoundError",
    "find_store_path",
    "generate_id",
]
