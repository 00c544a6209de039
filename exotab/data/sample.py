"""Built-in sample dataset served when a load fails."""

from .dataset import Dataset

_COLUMNS = ("id", "nombre", "edad", "salario", "ciudad", "categoria", "activo")

_ROWS = (
    (1, "Ana", 45, 5500, "Lima", "A", True),
    (2, "Juan", 28, 3200, "Arequipa", "B", True),
    (3, "María", 35, 4100, "Cusco", "C", False),
    (4, "Pedro", 50, 6000, "Trujillo", "A", True),
    (5, "Lucía", 25, 2800, "Lima", "B", True),
    (6, "Carlos", 38, 4900, "Arequipa", "C", False),
    (7, "Elena", 42, 5200, "Cusco", "A", True),
    (8, "Diego", 22, 2500, "Trujillo", "B", True),
    (9, "Sofía", 30, 3800, "Lima", "C", True),
    (10, "Miguel", 47, 5800, "Arequipa", "A", False),
)

# Rows 11-15 repeat earlier rows verbatim so duplicate removal has work to do.
_DUPLICATE_IDS = (9, 5, 1, 6, 8)

SAMPLE_SOURCE = "sample"


def sample_records():
    by_id = {row[0]: row for row in _ROWS}
    rows = list(_ROWS) + [by_id[i] for i in _DUPLICATE_IDS]
    return [dict(zip(_COLUMNS, row)) for row in rows]


def sample_dataset() -> Dataset:
    """The 15-row demo table (10 distinct rows plus 5 exact duplicates)."""
    return Dataset.from_records(sample_records(), source=SAMPLE_SOURCE)
