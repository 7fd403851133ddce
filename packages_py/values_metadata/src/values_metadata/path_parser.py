def get_array_prefix(path: str) -> str:
    """
    Path of the innermost array holding a flattened leaf.

    "a.b[0]" -> "a.b", "a[0].b[2]" -> "a[0].b", "a[1].name" -> "a".
    Paths without an index are returned unchanged.
    """
    idx = path.rfind('[')
    if idx == -1:
        return path
    return path[:idx]
