from typing import List


def parse_selection(selection: str) -> List[int]:
    """Parse comma-separated indices, dropping tokens that are not integers."""

    numbers: List[int] = []
    for part in selection.strip().split(","):
        try:
            numbers.append(int(part.strip()))
        except ValueError:
            continue

    return numbers
