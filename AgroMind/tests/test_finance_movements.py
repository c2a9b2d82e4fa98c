import pytest

from utils.datetime_utils import today_local


@pytest.fixture
def movements_url(farm):
    return f"/api/farms/{farm['id']}/finance/movements"


def _movement(**overrides):
    body = {"date": "2030-04-10", "concept": "Compra de urea", "type": "Gasto", "amount": 150}
    body.update(overrides)
    return body


class TestCreateMovement:
    def test_keyword_category_and_defaults(self, client, auth_headers, movements_url):
        r = client.post(movements_url, json=_movement(), headers=auth_headers)
        assert r.status_code == 201
        m = r.json()["movement"]
        assert m["category"] == "Fertilizantes"
        assert m["amount"] == 150
        assert m["date"] == "2030-04-10"
        assert m["note"] is None
        assert m["invoiceNumber"] is None

    def test_explicit_category_is_kept(self, client, auth_headers, movements_url):
        r = client.post(movements_url, json=_movement(category="Insumos"), headers=auth_headers)
        assert r.json()["movement"]["category"] == "Insumos"

    def test_amount_string_with_commas_and_iso_datetime(self, client, auth_headers, movements_url):
        r = client.post(
            movements_url,
            json=_movement(amount="1,250.50", date="2030-04-10T15:30:00Z", type="Ingreso",
                           concept="Venta de café", invoiceNumber="F-001"),
            headers=auth_headers,
        )
        assert r.status_code == 201
        m = r.json()["movement"]
        assert m["amount"] == 1250.5
        assert m["date"] == "2030-04-10"
        assert m["invoiceNumber"] == "F-001"
        assert m["category"] == "General"

    def test_invalid_or_missing_date_defaults_to_today(self, client, auth_headers, movements_url):
        r = client.post(movements_url, json=_movement(date="ayer"), headers=auth_headers)
        assert r.status_code == 201
        assert r.json()["movement"]["date"] == today_local().isoformat()

    @pytest.mark.parametrize("overrides,message", [
        ({"concept": "  "}, "concept es requerido."),
        ({"type": "Transferencia"}, 'type debe ser \\"Ingreso\\" o \\"Gasto\\".'),
        ({"amount": -5}, "amount inválido (debe ser número >= 0)."),
        ({"amount": "abc"}, "amount inválido (debe ser número >= 0)."),
        ({"amount": True}, "amount inválido (debe ser número >= 0)."),
    ])
    def test_validation(self, client, auth_headers, movements_url, overrides, message):
        r = client.post(movements_url, json=_movement(**overrides), headers=auth_headers)
        assert r.status_code == 422
        assert message in r.text


class TestListUpdateDelete:
    def test_list_by_date_desc(self, client, auth_headers, movements_url):
        for d in ("2030-01-05", "2030-03-01", "2030-02-10"):
            client.post(movements_url, json=_movement(date=d), headers=auth_headers)
        dates = [m["date"] for m in client.get(movements_url, headers=auth_headers).json()["movements"]]
        assert dates == ["2030-03-01", "2030-02-10", "2030-01-05"]

    def test_update_recomputes_category(self, client, auth_headers, movements_url):
        m = client.post(movements_url, json=_movement(concept="Varios"), headers=auth_headers).json()["movement"]
        assert m["category"] == "General"

        r = client.put(f"{movements_url}/{m['id']}", json={"concept": "Diésel tractor"}, headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["ok"] is True
        assert r.json()["movement"]["category"] == "Transporte"

        r = client.put(f"{movements_url}/{m['id']}", json={"amount": 99}, headers=auth_headers)
        assert r.json()["movement"]["category"] == "Transporte"
        assert r.json()["movement"]["amount"] == 99

    def test_update_invalid_date_is_rejected(self, client, auth_headers, movements_url):
        m = client.post(movements_url, json=_movement(), headers=auth_headers).json()["movement"]
        r = client.put(f"{movements_url}/{m['id']}", json={"date": "nope"}, headers=auth_headers)
        assert r.status_code == 422
        assert "date inválida." in r.text

    def test_movement_of_other_farm_is_404(self, client, auth_headers, movements_url):
        m = client.post(movements_url, json=_movement(), headers=auth_headers).json()["movement"]
        other = client.post("/api/farms", json={"name": "Otra"}, headers=auth_headers).json()["farm"]
        url = f"/api/farms/{other['id']}/finance/movements/{m['id']}"
        assert client.put(url, json={"amount": 1}, headers=auth_headers).status_code == 404
        assert client.delete(url, headers=auth_headers).status_code == 404

    def test_delete(self, client, auth_headers, movements_url):
        m = client.post(movements_url, json=_movement(), headers=auth_headers).json()["movement"]
        assert client.delete(f"{movements_url}/{m['id']}", headers=auth_headers).json() == {"ok": True}
        assert client.get(movements_url, headers=auth_headers).json()["movements"] == []
