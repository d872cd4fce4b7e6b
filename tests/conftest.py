from pathlib import Path
from typing import Dict, List

import pandas as pd
import pytest

ENTRY = "Validació d'entrada"
EXIT = "Validació de Sortida"


def make_row(
    number: object,
    timestamp: str,
    agency: str,
    operation: str,
    station: str,
    transaction_type: str = "Validació correcta",
) -> Dict[str, object]:
    return {
        "Num.Transacción": number,
        "Data": timestamp,
        "Agència": agency,
        "Operació": operation,
        "Transacció": transaction_type,
        "Estació Fix": station,
    }


@pytest.fixture
def validation_rows() -> List[Dict[str, object]]:
    return [
        make_row("1", "2024-03-01 08:00:00", "FGC", ENTRY, "Sarrià"),
        make_row("2", "2024-03-01 08:20:00", "FGC", EXIT, "Provença"),
        make_row("3", "2024-03-01 09:00:00", "TMB", ENTRY, "Diagonal"),
        make_row("4", "2024-03-01 09:05:00", "FGC", "Emissió", "Sarrià"),
        make_row("5", "??", "FGC", ENTRY, "Sarrià"),
        make_row("6", "2024-03-01 18:00:00", "FGC", ENTRY, "Provença"),
        make_row("7", "2024-03-01 18:30:00", "FGC", EXIT, "Sarrià"),
        make_row("8", "2024-03-01 19:00:00", "FGC", ENTRY, "Sarrià"),
        make_row("", "2024-03-01 20:00:00", "TMB", ENTRY, "Provença", transaction_type="Validació"),
        make_row("10", "2024-03-01 21:00:00", "Renfe", ENTRY, "Sarrià", transaction_type="Error de lectura"),
    ]


@pytest.fixture
def validation_csv(tmp_path: Path, validation_rows: List[Dict[str, object]]) -> Path:
    path = tmp_path / "validations.csv"
    pd.DataFrame(validation_rows).to_csv(path, index=False, encoding="utf-8")
    return path
