# tests/test_pretty.py
from pathlib import Path

from extree import SortPolicy, draw_tree, render_tree, scan_tree


def _make_file(p: Path, content: str = "x"):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content, encoding="utf-8")


def _ext(name: str, count: int, size: str, name_width: int = 1, count_width: int = 1) -> str:
    return f"{name:<{name_width}} ── {count:>{count_width}} ── {size:>10}"


def test_single_directory_alphabetical(tmp_path: Path):
    _make_file(tmp_path / "a.txt", "x" * 10)
    _make_file(tmp_path / "b.txt", "x" * 20)
    _make_file(tmp_path / "c.log", "x" * 5)

    lines = render_tree(scan_tree(tmp_path, 1), SortPolicy.ALPHABETICAL)

    assert lines == [
        tmp_path.name,
        "├── " + _ext("log", 1, "5 B"),
        "└── " + _ext("txt", 2, "30 B"),
    ]


def test_policy_orders_extensions_by_size(tmp_path: Path):
    _make_file(tmp_path / "a.txt", "x" * 10)
    _make_file(tmp_path / "b.txt", "x" * 20)
    _make_file(tmp_path / "c.log", "x" * 50)

    lines = render_tree(scan_tree(tmp_path, 1), SortPolicy.FILE_SIZE)

    assert lines[1:] == [
        "├── " + _ext("log", 1, "50 B"),
        "└── " + _ext("txt", 2, "30 B"),
    ]


def test_nested_structure_pipes(tmp_path: Path):
    # root/
    #   a.py
    #   dirA/
    #     b.txt
    #     sub/
    #       c.md
    #   dirB/
    #     d.txt
    _make_file(tmp_path / "a.py")
    _make_file(tmp_path / "dirA/b.txt")
    _make_file(tmp_path / "dirA/sub/c.md")
    _make_file(tmp_path / "dirB/d.txt")

    out = draw_tree(scan_tree(tmp_path, 3), SortPolicy.ALPHABETICAL)

    assert out.splitlines() == [
        tmp_path.name,
        "├── " + _ext("py", 1, "1 B"),
        "├── dirA",
        "│   ├── " + _ext("txt", 1, "1 B"),
        "│   └── sub",
        "│       └── " + _ext("md", 1, "1 B"),
        "└── dirB",
        "    └── " + _ext("txt", 1, "1 B"),
    ]


def test_pipe_continues_below_a_deep_last_child(tmp_path: Path):
    _make_file(tmp_path / "a/b/c/x.txt")
    _make_file(tmp_path / "z/y.txt")

    lines = render_tree(scan_tree(tmp_path, 5))

    assert lines == [
        tmp_path.name,
        "├── a",
        "│   └── b",
        "│       └── c",
        "│           └── " + _ext("txt", 1, "1 B"),
        "└── z",
        "    └── " + _ext("txt", 1, "1 B"),
    ]


def test_columns_are_aligned_per_directory(tmp_path: Path):
    for i in range(12):
        _make_file(tmp_path / f"f{i}.py", "x" * 2048)
    _make_file(tmp_path / "noext")
    _make_file(tmp_path / "sub/a.md")

    lines = render_tree(scan_tree(tmp_path, 1), SortPolicy.FILE_COUNT)

    assert lines == [
        tmp_path.name,
        "├── " + _ext("py", 12, "24.00 kiB", 3, 2),
        "├── " + _ext("N/A", 1, "1 B", 3, 2),
        "└── sub",
        "    └── " + _ext("md", 1, "1 B"),
    ]


def test_empty_directory_is_hidden_and_sibling_becomes_last(tmp_path: Path):
    _make_file(tmp_path / "full/x.txt")
    (tmp_path / "zempty").mkdir()

    tree = scan_tree(tmp_path, 1)

    assert render_tree(tree) == [
        tmp_path.name,
        "└── full",
        "    └── " + _ext("txt", 1, "1 B"),
    ]
    assert render_tree(tree, show_empty=True) == [
        tmp_path.name,
        "├── full",
        "│   └── " + _ext("txt", 1, "1 B"),
        "└── zempty",
    ]


def test_last_extension_closes_when_all_children_are_hidden(tmp_path: Path):
    _make_file(tmp_path / "t.txt")
    (tmp_path / "e/nested").mkdir(parents=True)

    tree = scan_tree(tmp_path, 3)

    assert render_tree(tree) == [
        tmp_path.name,
        "└── " + _ext("txt", 1, "1 B"),
    ]
    assert render_tree(tree, show_empty=True) == [
        tmp_path.name,
        "├── " + _ext("txt", 1, "1 B"),
        "└── e",
        "    └── nested",
    ]


def test_empty_root_is_still_printed(tmp_path: Path):
    assert render_tree(scan_tree(tmp_path, 2)) == [tmp_path.name]


def test_render_writes_each_line_and_does_not_modify_tree(tmp_path: Path):
    _make_file(tmp_path / "a.txt", "x" * 10)
    _make_file(tmp_path / "b.log", "x" * 5)
    tree = scan_tree(tmp_path, 1)
    before = list(tree.extensions)

    written: list[str] = []
    lines = render_tree(tree, SortPolicy.ALPHABETICAL, write=written.append)

    assert written == lines
    assert list(tree.extensions) == before


def test_draw_tree_returns_string_and_does_not_print(tmp_path: Path, capsys):
    _make_file(tmp_path / "a.txt")
    out = draw_tree(scan_tree(tmp_path))
    assert isinstance(out, str)
    assert capsys.readouterr().out == ""
    assert out.splitlines()[0] == tmp_path.name
