"""
Pytest configuration and fixtures for rehome tests.

The central fixture is ``billing_tree``: a small mixed Java/Kotlin project
in which ``com.acme.billing.Invoice`` is referenced every way the engine
has to handle (explicit import, same-package use, wildcard import,
fully-qualified use, comments and strings) next to an unrelated
``com.other.Invoice``.
"""

from pathlib import Path
from textwrap import dedent

import pytest


BILLING_FILES = {
    "src/main/java/com/acme/billing/Invoice.java": dedent(
        """\
        package com.acme.billing;

        import java.util.List;

        public class Invoice {
            private final List<String> lines;

            public Invoice(List<String> lines) {
                this.lines = lines;
            }
        }
        """
    ),
    "src/main/java/com/acme/billing/InvoiceService.java": dedent(
        """\
        package com.acme.billing;

        public class InvoiceService {
            public Invoice create() {
                return new Invoice(java.util.List.of());
            }
        }
        """
    ),
    "src/main/java/com/acme/web/InvoiceController.java": dedent(
        """\
        package com.acme.web;

        import com.acme.billing.Invoice;
        import com.acme.billing.InvoiceService;

        public class InvoiceController {
            // Invoice is rendered as JSON
            private final InvoiceService service = new InvoiceService();

            public Invoice show() {
                String label = "Invoice";
                return service.create();
            }
        }
        """
    ),
    "src/main/java/com/acme/reports/Summary.java": dedent(
        """\
        package com.acme.reports;

        public class Summary {
            private com.acme.billing.Invoice latest;
        }
        """
    ),
    "src/main/java/com/other/Invoice.java": dedent(
        """\
        package com.other;

        public class Invoice {
        }
        """
    ),
    "src/main/java/com/other/Printer.java": dedent(
        """\
        package com.other;

        public class Printer {
            void print(Invoice invoice) {}
        }
        """
    ),
    "src/main/kotlin/com/acme/ui/Screen.kt": dedent(
        """\
        package com.acme.ui

        import com.acme.billing.*

        class Screen(val invoice: Invoice)
        """
    ),
}


def _write_tree(root: Path, files: dict[str, str]) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
    return root.resolve()


@pytest.fixture
def make_tree(tmp_path):
    """
    Factory fixture: write ``{relative_path: content}`` under a fresh root.

    Usage:
        root = make_tree({"src/com/foo/Bar.java": "package com.foo; ..."})
    """
    counter = {"n": 0}

    def _make(files: dict[str, str]) -> Path:
        counter["n"] += 1
        return _write_tree(tmp_path / f"proj{counter['n']}", files)

    return _make


@pytest.fixture
def billing_tree(make_tree):
    """The mixed Java/Kotlin billing project, returned as its resolved root."""
    return make_tree(BILLING_FILES)


@pytest.fixture
def tree_state():
    """
    Return a function capturing every file's bytes and every directory.

    Two captures compare equal only if the tree is byte-for-byte identical.
    """

    def _capture(root: Path) -> tuple[dict[str, bytes], set[str]]:
        files = {}
        dirs = set()
        for path in sorted(root.rglob("*")):
            rel = path.relative_to(root).as_posix()
            if path.is_dir():
                dirs.add(rel)
            else:
                files[rel] = path.read_bytes()
        return files, dirs

    return _capture


@pytest.fixture
def read(billing_tree):
    """Read a billing_tree file as text (relative path)."""

    def _read(rel: str) -> str:
        return (billing_tree / rel).read_bytes().decode("utf-8")

    return _read
