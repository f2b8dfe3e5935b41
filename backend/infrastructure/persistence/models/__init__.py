"""
Persistence Models Package.

All Django ORM models for the PRM system.
"""

# Base mixins
from .base import (
    TimeStampedMixin,
    VersionedMixin,
    AuditMixin,
    BaseModel,
    BaseModelWithHistory,
)

# User models
from .users import (
    User,
    UserManager,
    UserRoleChoices,
)

# Directory models
from .directory import (
    Person,
    Counterparty,
)

# Catalog models
from .catalog import (
    NomenclatureTypeChoices,
    NomenclatureGroup,
    NomenclatureKind,
    Unit,
    UnitAlias,
    NomenclatureItem,
)

# Project models
from .project import (
    ProjectStatusChoices,
    ProductStatusChoices,
    Project,
    ProjectProduct,
    WorkStage,
    ModelLink,
)

# Specification models
from .specification import (
    ProductSpecification,
    Specification,
)

__all__ = [
    # Base
    'TimeStampedMixin',
    'VersionedMixin',
    'AuditMixin',
    'BaseModel',
    'BaseModelWithHistory',
    # Users
    'User',
    'UserManager',
    'UserRoleChoices',
    # Directory
    'Person',
    'Counterparty',
    # Catalog
    'NomenclatureTypeChoices',
    'NomenclatureGroup',
    'NomenclatureKind',
    'Unit',
    'UnitAlias',
    'NomenclatureItem',
    # Project
    'ProjectStatusChoices',
    'ProductStatusChoices',
    'Project',
    'ProjectProduct',
    'WorkStage',
    'ModelLink',
    # Specification
    'ProductSpecification',
    'Specification',
]
