class IdGenerator:
    """
    Produces temporary identifiers like ``mod$0``, ``key$1``.

    One generator belongs to one rewrite, so two independent runs over the
    same input always produce the same names. ``reset`` exists for hosts
    that deliberately reuse a generator across unrelated runs.
    """

    def __init__(self) -> None:
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def generate(self, prefix: str) -> str:
        ident = f"{prefix}${self._counter}"
        self._counter += 1
        return ident

    def reset(self) -> None:
        self._counter = 0
