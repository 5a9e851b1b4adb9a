"""
Unit tests for the per-language structure analyzers.

Dependencies: pytest, code_chunker.analysis
System role: Structural heuristics validation
"""

import pytest

from code_chunker.analysis import (
    AnalyzerFactory,
    BlockType,
    CurlyBraceAnalyzer,
    GenericAnalyzer,
    PythonAnalyzer,
    StructuralAnalyzer,
    calculate_block_importance,
)
from code_chunker.chunking.file_collection import BINARY_PLACEHOLDER
from code_chunker.exceptions import ParseHeuristicMiss


class TestBlockImportance:
    """Test suite for name-based importance scoring."""

    @pytest.mark.parametrize("name,block_type,expected", [
        ("main", BlockType.FUNCTION, 8),
        ("_private", BlockType.FUNCTION, 3),
        ("test_utils", BlockType.FUNCTION, 3),
        ("AppController", BlockType.CLASS, 10),
        ("Foo", BlockType.CLASS, 8),
        ("bar", BlockType.FUNCTION, 5),
        ("_test_helper", BlockType.FUNCTION, 1),
    ])
    def test_scores(self, name, block_type, expected):
        assert calculate_block_importance(name, block_type) == expected

    def test_scores_are_clamped(self):
        assert calculate_block_importance("MainRenderController", BlockType.CLASS) == 10

    def test_scoring_is_deterministic(self):
        first = calculate_block_importance("renderView", BlockType.FUNCTION)
        second = calculate_block_importance("renderView", BlockType.FUNCTION)
        assert first == second


class TestPythonAnalyzer:
    """Test suite for the indentation-based analyzer."""

    def test_functions_and_kinds(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)

        kinds = {f.name: f.kind for f in structure.functions}
        assert kinds == {
            "__init__": "special",
            "fetch": "async",
            "_helper": "private",
            "main": "regular",
        }

    def test_classes_and_inheritance(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)

        assert len(structure.classes) == 1
        assert structure.classes[0].name == "UserService"
        assert structure.classes[0].inherits == ["BaseService"]
        assert structure.classes[0].line == 5

    def test_imports(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)

        modules = {imp.module: imp.imported_items for imp in structure.imports}
        assert modules == {"os": ["os"], "typing": ["List", "Dict"]}

    def test_exports_are_public_top_level_names(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)

        assert [e.name for e in structure.exports] == ["UserService", "main"]

    def test_blocks_nest_by_indentation(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)
        blocks = {b.name: b for b in structure.semantic_blocks}

        assert [b.name for b in structure.semantic_blocks] == [
            "UserService", "__init__", "fetch", "_helper", "main"
        ]
        assert blocks["UserService"].start_line == 4
        assert blocks["UserService"].end_line == 16
        assert blocks["__init__"].end_line == 10
        assert blocks["main"].start_line == 17
        assert blocks["UserService"].importance == 10
        assert blocks["_helper"].importance == 2

    def test_docstring_content_is_not_detected(self):
        source = (
            'def real():\n'
            '    """\n'
            '    def fake():\n'
            '    class Fake:\n'
            '    """\n'
            '    return 1\n'
        )
        structure = PythonAnalyzer().analyze("doc.py", source)

        assert [f.name for f in structure.functions] == ["real"]
        assert structure.classes == []

    def test_unclosed_block_ends_at_end_of_file(self):
        source = "class Broken:\n    def method(self):\n        x = (\n"
        structure = PythonAnalyzer().analyze("broken.py", source)

        last_line = len(source.split("\n")) - 1
        assert all(b.end_line == last_line for b in structure.semantic_blocks)

    def test_file_type_and_complexity(self, python_service_source):
        structure = PythonAnalyzer().analyze("service.py", python_service_source)

        assert structure.file_type == "python"
        # 4 functions * 2 + 1 class * 3 + 2 imports + 2 exports
        assert structure.complexity == 15


class TestCurlyBraceAnalyzer:
    """Test suite for JavaScript-family and JVM/.NET heuristics."""

    JS_SOURCE = (
        "import React, { useState } from 'react';\n"
        "import { formatDate } from './utils/date';\n"
        "const api = require('./api');\n"
        "\n"
        "// function commented() {\n"
        "export class Dashboard extends Component {\n"
        "  render() {\n"
        "    return null;\n"
        "  }\n"
        "}\n"
        "\n"
        "export const fetchData = async (url) => {\n"
        "  return url;\n"
        "};\n"
        "\n"
        "function* idGenerator() {\n"
        "  yield 1;\n"
        "}\n"
        "module.exports = Dashboard;\n"
    )

    JAVA_SOURCE = (
        "package com.example;\n"
        "\n"
        "import java.util.List;\n"
        "\n"
        "public class OrderController extends BaseController implements Handler {\n"
        "    public OrderController() {\n"
        "    }\n"
        "\n"
        "    public List<Order> listOrders(int page) {\n"
        "        return null;\n"
        "    }\n"
        "}\n"
    )

    def test_js_imports(self):
        structure = CurlyBraceAnalyzer().analyze("dashboard.js", self.JS_SOURCE)

        modules = {imp.module: imp.imported_items for imp in structure.imports}
        assert modules == {
            "react": ["React", "useState"],
            "./utils/date": ["formatDate"],
            "./api": ["api"],
        }

    def test_js_functions_skip_comments(self):
        structure = CurlyBraceAnalyzer().analyze("dashboard.js", self.JS_SOURCE)

        kinds = {f.name: f.kind for f in structure.functions}
        assert kinds == {"render": "regular", "fetchData": "async", "idGenerator": "generator"}

    def test_js_classes_and_exports(self):
        structure = CurlyBraceAnalyzer().analyze("dashboard.js", self.JS_SOURCE)

        assert [(c.name, c.inherits) for c in structure.classes] == [("Dashboard", ["Component"])]
        assert [(e.name, e.kind) for e in structure.exports] == [
            ("Dashboard", "named"),
            ("fetchData", "named"),
            ("module.exports", "commonjs"),
        ]

    def test_js_blocks_nest_by_brace_depth(self):
        structure = CurlyBraceAnalyzer().analyze("dashboard.js", self.JS_SOURCE)
        blocks = {b.name: b for b in structure.semantic_blocks}

        assert blocks["Dashboard"].depth == 0
        assert blocks["render"].depth == 1
        assert blocks["render"].end_line == 10
        assert blocks["Dashboard"].end_line == 10
        assert blocks["fetchData"].start_line == 11

    def test_java_structure(self):
        structure = CurlyBraceAnalyzer().analyze("OrderController.java", self.JAVA_SOURCE)

        assert structure.file_type == "java"
        assert structure.classes[0].name == "OrderController"
        assert structure.classes[0].inherits == ["BaseController", "Handler"]
        assert [f.name for f in structure.functions] == ["OrderController", "listOrders"]
        assert structure.imports[0].module == "java.util.List"
        assert structure.exports[0].name == "OrderController"

    def test_control_flow_is_not_a_function(self):
        source = "function run() {\n  if (ready) {\n    while (x) {\n    }\n  }\n}\n"
        structure = CurlyBraceAnalyzer().analyze("run.js", source)

        assert [f.name for f in structure.functions] == ["run"]


class TestGenericAnalyzer:
    """Test suite for the section-header fallback."""

    def test_sections_from_headers(self):
        source = (
            "# Project Title\n"
            "Intro text.\n"
            "## Installation\n"
            "Steps.\n"
            "[database]\n"
            "host = x\n"
            "USAGE NOTES\n"
        )
        structure = GenericAnalyzer().analyze("README.md", source)

        assert [b.name for b in structure.semantic_blocks] == [
            "Project Title", "Installation", "database", "USAGE NOTES"
        ]
        assert all(b.type == "section" for b in structure.semantic_blocks)
        assert structure.file_type == "documentation"

    def test_whole_file_block_without_headers(self):
        structure = GenericAnalyzer().analyze("notes.txt", "just some\nlowercase text\n")

        assert len(structure.semantic_blocks) == 1
        block = structure.semantic_blocks[0]
        assert block.name == "notes.txt"
        assert block.start_line == 0
        assert block.end_line == 2

    def test_empty_file(self):
        structure = GenericAnalyzer().analyze("empty.md", "")

        assert structure.semantic_blocks == []
        assert structure.functions == []
        assert structure.complexity == 0


class TestAnalyzerFactory:
    """Test suite for extension dispatch."""

    @pytest.mark.parametrize("extension,expected", [
        ("py", PythonAnalyzer),
        (".tsx", CurlyBraceAnalyzer),
        ("KT", CurlyBraceAnalyzer),
        ("cs", CurlyBraceAnalyzer),
        ("md", GenericAnalyzer),
        ("", GenericAnalyzer),
    ])
    def test_get_analyzer(self, extension, expected):
        assert isinstance(AnalyzerFactory.get_analyzer(extension), expected)

    def test_is_supported(self):
        assert AnalyzerFactory.is_supported(".java")
        assert not AnalyzerFactory.is_supported("yaml")


class TestStructuralAnalyzer:
    """Test suite for the analysis facade and its fallback."""

    def test_empty_file_never_crashes(self):
        structure = StructuralAnalyzer().analyze("empty.py", "")

        assert structure.functions == []
        assert structure.semantic_blocks == []
        assert structure.complexity == 0

    def test_nul_bytes_fall_back_to_sections(self):
        with pytest.raises(ParseHeuristicMiss):
            PythonAnalyzer().analyze("weird.py", "def a():\x00\n")

        structure = StructuralAnalyzer().analyze("weird.py", "def a():\x00\n")
        assert structure.analyzer == "GenericAnalyzer"
        assert len(structure.semantic_blocks) == 1

    def test_binary_entries_use_generic_analyzer(self):
        structure = StructuralAnalyzer().analyze("logo.png", BINARY_PLACEHOLDER, binary=True)

        assert structure.analyzer == "GenericAnalyzer"
        assert structure.functions == []

    def test_priority_ranks_entry_points_above_tests(self):
        analyzer = StructuralAnalyzer()
        main = analyzer.analyze("main.py", "def run():\n    pass\n")
        test = analyzer.analyze("test_run.py", "def test_run():\n    pass\n")

        assert main.priority == 8
        assert test.priority == 3
