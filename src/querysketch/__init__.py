"""querysketch - Sampling-based size estimation for data-layout candidates."""

__version__ = "0.1.0"
__license__ = "MIT"

# Exception hierarchy (import first so other modules can use it)
from querysketch.exceptions import (
    QuerySketchError,
    StructuralMismatch,
    DegenerateSample,
    ConfigurationError,
    SourceLoadError,
)

from querysketch.models import (
    BasicReadSizeInfo,
    Caching,
    Candidate,
    CandidateKind,
    FileSkippingIndexing,
    ReadSizeInfo,
    Repartitioning,
    SizeInfo,
    SourceFile,
    SourceLoad,
)
from querysketch.config import (
    Config,
    Environment,
    get_config,
)
from querysketch.plan import (
    CandidateOperator,
    CandidatePlan,
    FileSourceRelation,
    LocatedSource,
    LogicalOperator,
    LogicalPlan,
    LogicalRelation,
    SourceLoadNode,
    locate_sources,
)
from querysketch.sampling import (
    InMemoryCollection,
    PartitionedCollection,
    Sketch,
    SketchBuilder,
    XorShiftRandom,
    reservoir_sample_and_count,
)
from querysketch.sources import (
    InMemorySourceLoader,
    PolarsSourceLoader,
    SourceLoader,
)
from querysketch.estimator import (
    SamplingSizeEstimator,
    SizeProjectionPolicy,
)
from querysketch.observability import EstimatorMetrics

__all__ = [
    # Exception hierarchy
    "QuerySketchError",
    "StructuralMismatch",
    "DegenerateSample",
    "ConfigurationError",
    "SourceLoadError",
    # Models
    "BasicReadSizeInfo",
    "Caching",
    "Candidate",
    "CandidateKind",
    "FileSkippingIndexing",
    "ReadSizeInfo",
    "Repartitioning",
    "SizeInfo",
    "SourceFile",
    "SourceLoad",
    # Plans
    "CandidateOperator",
    "CandidatePlan",
    "FileSourceRelation",
    "LocatedSource",
    "LogicalOperator",
    "LogicalPlan",
    "LogicalRelation",
    "SourceLoadNode",
    "locate_sources",
    # Sampling
    "InMemoryCollection",
    "PartitionedCollection",
    "Sketch",
    "SketchBuilder",
    "XorShiftRandom",
    "reservoir_sample_and_count",
    # Sources
    "InMemorySourceLoader",
    "PolarsSourceLoader",
    "SourceLoader",
    # Estimation
    "SamplingSizeEstimator",
    "SizeProjectionPolicy",
    # Configuration
    "Config",
    "Environment",
    "get_config",
    # Observability
    "EstimatorMetrics",
    # Metadata
    "__version__",
    "__license__",
]
