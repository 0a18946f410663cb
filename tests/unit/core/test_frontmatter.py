"""Unit tests for core/frontmatter.py"""

from pagewrap.core.frontmatter import parse_svelte_frontmatter, split_frontmatter


def test_split_frontmatter_with_yaml():
    """split_frontmatter extracts the YAML header and returns the body."""
    fm, body = split_frontmatter("---\ntitle: Hello\ntags:\n  - a\n  - b\n---\n# Body\n")
    assert fm == {"title": "Hello", "tags": ["a", "b"]}
    assert body == "# Body\n"


def test_split_frontmatter_no_header():
    """Text without a header is returned whole with empty frontmatter."""
    text = "# No frontmatter\n"
    assert split_frontmatter(text) == ({}, text)


def test_split_frontmatter_invalid_yaml_recovers():
    """Malformed YAML yields empty frontmatter rather than an error."""
    fm, body = split_frontmatter("---\nkey: [unclosed\n---\n# Body\n")
    assert fm == {}
    assert body == "# Body\n"


def test_split_frontmatter_non_mapping_recovers():
    """A YAML list header is not frontmatter."""
    fm, _ = split_frontmatter("---\n- a\n- b\n---\ntext\n")
    assert fm == {}


def test_split_frontmatter_dates_become_iso_strings():
    """YAML dates and datetimes are converted to ISO strings."""
    fm, _ = split_frontmatter("---\ndate: 2026-01-15\nupdated: 2026-01-15T10:30:00\n---\nx\n")
    assert fm == {"date": "2026-01-15", "updated": "2026-01-15T10:30:00"}


def test_svelte_frontmatter_fenced_header():
    """A leading --- fenced header is read from a component template."""
    assert parse_svelte_frontmatter("---\ntitle: Hello\n---\n<h1>x</h1>") == {"title": "Hello"}


def test_svelte_frontmatter_comment_header():
    """A leading HTML comment with YAML is read as the header."""
    code = "<!--\ntitle: Hello\norder: 2\n-->\n<h1>x</h1>"
    assert parse_svelte_frontmatter(code) == {"title": "Hello", "order": 2}


def test_svelte_frontmatter_fenced_comment_header():
    """A --- fenced YAML block inside the leading comment is read as the header."""
    code = "<!--\n---\ntitle: Hello\n---\n-->\n<script>let x</script>"
    assert parse_svelte_frontmatter(code) == {"title": "Hello"}


def test_svelte_frontmatter_absent():
    """Templates without a header give an empty mapping."""
    assert parse_svelte_frontmatter("<script>let x = 1</script>\n<p>{x}</p>") == {}


def test_svelte_frontmatter_plain_comment_ignored():
    """A leading prose comment is not mistaken for metadata."""
    assert parse_svelte_frontmatter("<!-- just a note -->\n<p>x</p>") == {}
