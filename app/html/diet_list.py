from domain.models import Diet


class DietList:
    """Diets an ingredient or recipe is not suitable for."""

    def __init__(self, diets: list[Diet], *, kind: str = "ingredient") -> None:
        self.diets = diets
        self.kind = kind

    @property
    def heading(self) -> str:
        if not self.diets:
            return f"This {self.kind} suits every diet we know of"
        return f"This {self.kind} is not suitable for"

    @property
    def labels(self) -> list[str]:
        return [d.label for d in self.diets]
