"""
Shared fixtures for the chunking test suite.

Provides: combined file-collection builders and small source snippets
Dependencies: pytest, code_chunker.chunking.file_collection
"""

import pytest

from code_chunker.chunking.file_collection import format_file_entry, build_file_collection


BAR_LINE = "  function bar() { return 1; }\n"


def make_collection(*entries, preamble: str = '') -> str:
    """Build a combined text from (filename, content) or (filename, content, relative_path) tuples"""
    formatted = []
    for entry in entries:
        filename, content = entry[0], entry[1]
        relative_path = entry[2] if len(entry) > 2 else ''
        formatted.append(format_file_entry(filename, content, relative_path=relative_path))
    return build_file_collection(formatted, preamble=preamble)


def large_js_file(class_name: str, approx_size: int = 60000) -> str:
    """A class at the top of the file followed by many small function lines"""
    repeats = approx_size // len(BAR_LINE)
    return f"class {class_name} {{\n" + BAR_LINE * repeats + "}\n"


@pytest.fixture
def two_large_files():
    """Two ~60,000 character files, each with a class at the top"""
    return make_collection(
        ('foo.js', large_js_file('Foo')),
        ('baz.js', large_js_file('Baz')),
    )


@pytest.fixture
def python_service_source():
    return (
        '"""Module doc."""\n'
        'import os\n'
        'from typing import List, Dict\n'
        '\n'
        'class UserService(BaseService):\n'
        '    """Service doc\n'
        '    spanning lines\n'
        '    """\n'
        '    def __init__(self):\n'
        '        self.x = 1\n'
        '\n'
        '    async def fetch(self):\n'
        '        pass\n'
        '\n'
        '    def _helper(self):\n'
        '        pass\n'
        '\n'
        'def main():\n'
        '    pass\n'
    )


@pytest.fixture
def related_python_files():
    """A helper module and an app module that imports and calls it"""
    helpers = (
        'import json\n'
        '\n'
        'def format_payload(data):\n'
        '    return json.dumps(data)\n'
    )
    app = (
        'import os\n'
        'from helpers import format_payload\n'
        '\n'
        'def main():\n'
        '    print(format_payload({"cwd": os.getcwd()}))\n'
    )
    return make_collection(
        ('helpers.py', helpers, 'utils/helpers.py'),
        ('app.py', app, 'app.py'),
    )


@pytest.fixture
def mixed_collection():
    """A realistic mix of languages with a free-text preamble"""
    js = (
        "import { formatDate } from './utils';\n"
        "\n"
        "export class Dashboard extends Component {\n"
        "  render() {\n"
        "    return formatDate(this.props.date);\n"
        "  }\n"
        "}\n"
    ) * 20
    utils = (
        "export function formatDate(value) {\n"
        "  return value.toISOString();\n"
        "}\n"
    ) * 15
    readme = "# Project\n\nSome words about the project.\n\n## Setup\n\nRun it.\n" * 10
    py = (
        "class AppController:\n"
        "    def setup(self):\n"
        "        return True\n"
        "\n"
        "def main():\n"
        "    AppController().setup()\n"
    ) * 12
    return make_collection(
        ('dashboard.js', js, 'src/dashboard.js'),
        ('utils.js', utils, 'src/utils.js'),
        ('README.md', readme),
        ('main.py', py, 'app/main.py'),
        preamble="Project files exported for review\n\n",
    )


@pytest.fixture
def collection_builder():
    return make_collection
