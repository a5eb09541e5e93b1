"""
Tests for fiscal year endpoints (/api/fiscal-years).

Covers:
- Get and delete by id
- Single field validation on blur
- Row state classification of a whole grid
"""


def grid_row(**kwargs):
    row = {"fiscal_year": "", "start_date": "", "end_date": "", "remarks": ""}
    row.update(kwargs)
    return row


class TestGetFiscalYear:
    """Tests for GET /api/fiscal-years/{id}"""

    def test_get(self, client, test_company_with_fiscal_year):
        company, fiscal_year = test_company_with_fiscal_year
        response = client.get(f"/api/fiscal-years/{fiscal_year.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["company_id"] == company.id
        assert data["start_date"] == "20220101"

    def test_get_unknown(self, client):
        assert client.get("/api/fiscal-years/unknown").status_code == 404


class TestDeleteFiscalYear:
    """Tests for DELETE /api/fiscal-years/{id}"""

    def test_delete(self, client, test_company_with_fiscal_year):
        _, fiscal_year = test_company_with_fiscal_year
        fiscal_year_id = fiscal_year.id
        assert client.delete(f"/api/fiscal-years/{fiscal_year_id}").status_code == 204
        assert client.get(f"/api/fiscal-years/{fiscal_year_id}").status_code == 404

    def test_delete_twice(self, client, test_company_with_fiscal_year):
        _, fiscal_year = test_company_with_fiscal_year
        fiscal_year_id = fiscal_year.id
        assert client.delete(f"/api/fiscal-years/{fiscal_year_id}").status_code == 204
        assert client.delete(f"/api/fiscal-years/{fiscal_year_id}").status_code == 204


class TestValidateField:
    """Tests for POST /api/fiscal-years/validate-field"""

    def test_valid_year(self, client):
        response = client.post("/api/fiscal-years/validate-field", json={
            "field": "fiscal_year",
            "row": grid_row(fiscal_year="2024"),
        })
        assert response.status_code == 200
        assert response.json()["is_valid"] is True

    def test_year_out_of_range(self, client):
        response = client.post("/api/fiscal-years/validate-field", json={
            "field": "fiscal_year",
            "row": grid_row(fiscal_year="1899"),
        })
        data = response.json()
        assert data["is_valid"] is False
        assert data["kind"] == "RANGE"

    def test_end_before_start(self, client):
        response = client.post("/api/fiscal-years/validate-field", json={
            "field": "end_date",
            "row": grid_row(start_date="20241231", end_date="20240101"),
        })
        assert response.json()["kind"] == "RANGE_ORDER"

    def test_overlap_with_sibling(self, client):
        response = client.post("/api/fiscal-years/validate-field", json={
            "field": "start_date",
            "row": grid_row(fiscal_year="2024", start_date="20240101", end_date="20241231"),
            "sibling_rows": [grid_row(fiscal_year="2023", start_date="20230701", end_date="20240630")],
        })
        assert response.json()["kind"] == "DATE_OVERLAP_IN_SESSION"

    def test_unknown_field(self, client):
        response = client.post("/api/fiscal-years/validate-field", json={
            "field": "company_id",
            "row": grid_row(),
        })
        assert response.status_code == 422


class TestRowStates:
    """Tests for POST /api/fiscal-years/row-states"""

    def test_states(self, client, test_company_with_fiscal_year):
        company, _ = test_company_with_fiscal_year
        response = client.post("/api/fiscal-years/row-states", json={
            "company_id": company.id,
            "rows": [
                grid_row(),
                grid_row(fiscal_year="2025"),
                grid_row(fiscal_year="2023", start_date="20230101", end_date="20231231"),
                grid_row(fiscal_year="2022", start_date="20240101", end_date="20241231"),
            ],
        })
        assert response.status_code == 200
        states = response.json()
        assert [s["index"] for s in states] == [0, 1, 2, 3]
        assert [s["state"] for s in states] == ["empty", "partially_filled", "valid", "invalid"]
        assert states[3]["result"]["kind"] == "DUPLICATE_YEAR"

    def test_duplicates_within_grid(self, client):
        response = client.post("/api/fiscal-years/row-states", json={
            "rows": [
                grid_row(fiscal_year="2024", start_date="20240101", end_date="20241231"),
                grid_row(fiscal_year="2024", start_date="20250101", end_date="20251231"),
            ],
        })
        states = response.json()
        assert all(s["state"] == "invalid" for s in states)
        assert states[0]["result"]["kind"] == "DUPLICATE_YEAR_IN_SESSION"
