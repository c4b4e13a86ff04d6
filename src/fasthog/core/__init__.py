# Core module for fasthog

from fasthog.core.aggregator import ResultAggregator
from fasthog.core.exceptions import (
    ConfigError,
    FasthogError,
    FileAccessError,
    OutputError,
    PatternSourceError,
    PatternSyntaxError,
    ScanError,
    WalkEntryError,
)
from fasthog.core.models import (
    FileMatchCount,
    JsonReport,
    Match,
    ScanRequest,
    ScanResult,
    ScanSummary,
)
from fasthog.core.patterns import (
    PatternFiles,
    PatternSet,
    PatternSource,
    compile_patterns,
    load_pattern_set,
)
from fasthog.core.scanner import (
    LineScanner,
    Scanner,
    ScanState,
    scan_directory,
    validate_directory,
)
from fasthog.core.walker import (
    DEFAULT_EXCLUDE_DIRS,
    DEFAULT_EXTENSIONS,
    DirectoryWalker,
    has_extension,
    merge_exclude_dirs,
    walk_candidates,
)
