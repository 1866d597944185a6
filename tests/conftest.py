from __future__ import annotations

import pytest

from catalog_engine.config import CatalogItem


@pytest.fixture
def catalog():
    return [
        CatalogItem(id="1", code="OR1", description="seringa descartável 10ml", brand="Acme"),
        CatalogItem(id="2", code="X9", description="cadeira de escritório"),
        CatalogItem(id="3", code="LV2", description="luva nitrílica tamanho médio", brand="Protec"),
        CatalogItem(id="4", code="SR5", description="seringa descartável 5ml sem agulha"),
    ]


@pytest.fixture
def sample_record():
    return {"id": "s-1", "quantity": 50, "description": "comprimido 500mg paracetamol", "brand": "Generico"}


@pytest.fixture
def process_record():
    return {
        "id": "p-1",
        "description": "Equipamento de monitoramento cardíaco",
        "brand": "Acme",
        "awardedQuantity": 100,
        "unitPrice": "12,50",
        "totalValue": "1250.00",
    }
