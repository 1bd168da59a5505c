"""
Default ignore patterns and source-file constants.

This module contains the static configuration used by ignore_patterns.py and
the scanner. Build outputs and dependency directories are excluded so that
generated code never receives rename edits.
"""

# ═══════════════════════════════════════════════════════════════════════════════
# Source Files
# ═══════════════════════════════════════════════════════════════════════════════

# Package-and-import languages the classifier understands
DEFAULT_SOURCE_EXTENSIONS: tuple[str, ...] = (
    ".java",
    ".kt",
    ".kts",
    ".groovy",
)

# Files larger than this are skipped (2MB). Hand-written sources never get
# close; anything bigger is generated.
DEFAULT_MAX_FILE_SIZE = 2_097_152

# Project-specific ignore file, gitignore syntax
IGNORE_FILE_NAME = ".rehomeignore"

# Default ignore patterns (always applied)
DEFAULT_IGNORES = [
    # ═══════════════════════════════════════════
    # Version Control
    # ═══════════════════════════════════════════
    ".git/",
    ".svn/",
    ".hg/",
    ".bzr/",
    # ═══════════════════════════════════════════
    # IDE and Editor
    # ═══════════════════════════════════════════
    ".idea/",  # JetBrains
    ".vscode/",
    ".eclipse/",
    ".settings/",  # Eclipse project settings
    ".metadata/",
    "*.swp",
    "*.swo",
    "*~",
    "*.bak",
    "*.orig",
    "*.rej",
    # ═══════════════════════════════════════════
    # JVM Build Outputs
    # ═══════════════════════════════════════════
    "build/",  # Gradle
    "target/",  # Maven, sbt
    "out/",  # IntelliJ
    "bin/",  # Eclipse
    "classes/",
    "generated/",
    "generated-sources/",
    "generated-test-sources/",
    ".gradle/",
    ".kotlin/",
    ".mvn/wrapper/",
    "*.class",
    "*.jar",
    "*.war",
    "*.ear",
    # ═══════════════════════════════════════════
    # Dependencies
    # ═══════════════════════════════════════════
    "node_modules/",
    "vendor/",
    "bower_components/",
    ".m2/",
    # ═══════════════════════════════════════════
    # Android
    # ═══════════════════════════════════════════
    ".cxx/",
    ".externalNativeBuild/",
    # ═══════════════════════════════════════════
    # Caches and temporary files
    # ═══════════════════════════════════════════
    ".cache/",
    ".tmp/",
    "tmp/",
    "*.tmp",
    "*.log",
    # ═══════════════════════════════════════════
    # Our own state directory
    # ═══════════════════════════════════════════
    ".rehome/",
]
