def parse_targets(targets):
    """
    Normalize an input list of targets: strip whitespace and drop blanks,
    keeping order. Case is preserved since scoring depends on the raw text.
    """
    if not targets:
        return []
    return [str(t).strip() for t in targets if str(t).strip()]


def read_targets_file(path):
    with open(path, "r", encoding="utf-8") as f:
        return parse_targets(f.readlines())
