"""The editor's Format button: re-indent code by brace depth."""

INDENT = '    '


def reindent_source(source: str) -> str:
    """Re-indent `source` four spaces per open brace.

    Each line is stripped and indented by the current depth. A line ending
    in ``}`` dedents itself; a line ending in ``{`` indents the lines after
    it. Comment lines never change the depth and blank lines become empty.
    """
    lines = source.split('\n')
    depth = 0
    out = []
    for raw in lines:
        line = raw.strip()
        is_comment = line.startswith('//')
        if line.endswith('}') and not is_comment:
            depth = max(0, depth - 1)
        out.append(INDENT * depth + line if line else '')
        if line.endswith('{') and not is_comment:
            depth += 1
    return '\n'.join(out)
