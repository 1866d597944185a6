import pandas as pd

from catalog_engine.catalog_build import catalog_items_from_df, load_catalog_items, load_item_records


def test_portuguese_headers_are_mapped():
    df = pd.DataFrame(
        {
            "Código": ["OR1", 123, None],
            "Descrição": ["seringa descartável 10ml", "gaze estéril", "sem código"],
            "Marca": ["Acme", None, "X"],
        }
    )
    items = catalog_items_from_df(df)
    assert [i.code for i in items] == ["OR1", "123"]
    assert items[0].id == "OR1"
    assert items[0].brand == "Acme"
    assert items[1].brand is None


def test_load_catalog_items_from_csv(tmp_path):
    path = tmp_path / "catalog.csv"
    path.write_text("id,code,description,brand\n10,OR1,seringa descartável 10ml,Acme\n11,X9,cadeira,\n", encoding="utf-8")
    items = load_catalog_items(path)
    assert [(i.id, i.code) for i in items] == [("10", "OR1"), ("11", "X9")]
    assert items[1].brand is None


def test_item_records_drop_blank_cells(tmp_path):
    path = tmp_path / "items.csv"
    path.write_text(
        "id,quantity,description,awarded_quantity,unit_price\n"
        "s1,50,comprimido 500mg,,\n"
        "p1,,equipamento,100,\"12,50\"\n",
        encoding="utf-8",
    )
    sample, process = load_item_records(path)
    assert "awarded_quantity" not in sample
    assert sample["quantity"] == 50
    assert "quantity" not in process
    assert process["awarded_quantity"] == 100
