from models import MapPoint, MapZone, Task


class TestFarms:
    def test_create_farm_defaults_and_preferred_center(self, client, auth_headers):
        r = client.post(
            "/api/farms",
            json={"name": "   ", "view": {"center": [9.93, -84.08], "zoom": 14}},
            headers=auth_headers,
        )
        assert r.status_code == 201
        farm = r.json()["farm"]
        assert farm["name"] == "Mi finca"
        assert farm["preferredCenter"] == [9.93, -84.08]
        assert farm["isPrimary"] is False

    def test_long_name_is_trimmed_to_80(self, client, auth_headers):
        r = client.post("/api/farms", json={"name": "x" * 120}, headers=auth_headers)
        assert r.status_code == 201
        assert len(r.json()["farm"]["name"]) == 80

    def test_duplicate_name_for_same_user_is_409(self, client, auth_headers, other_headers):
        assert client.post("/api/farms", json={"name": "Norte"}, headers=auth_headers).status_code == 201
        r = client.post("/api/farms", json={"name": "Norte"}, headers=auth_headers)
        assert r.status_code == 409
        assert r.json()["detail"] == "Ya existe una finca con ese nombre."
        # Otro usuario puede usar el mismo nombre
        assert client.post("/api/farms", json={"name": "Norte"}, headers=other_headers).status_code == 201

    def test_list_only_own_farms_newest_first(self, client, auth_headers, other_headers):
        client.post("/api/farms", json={"name": "Primera"}, headers=auth_headers)
        client.post("/api/farms", json={"name": "Segunda"}, headers=auth_headers)
        client.post("/api/farms", json={"name": "Ajena"}, headers=other_headers)

        r = client.get("/api/farms", headers=auth_headers)
        assert r.status_code == 200
        names = [f["name"] for f in r.json()["farms"]]
        assert names == ["Segunda", "Primera"]

    def test_requires_auth(self, client):
        assert client.get("/api/farms").status_code == 401

    def test_set_primary_clears_others(self, client, auth_headers):
        a = client.post("/api/farms", json={"name": "A"}, headers=auth_headers).json()["farm"]
        b = client.post("/api/farms", json={"name": "B"}, headers=auth_headers).json()["farm"]

        client.put(f"/api/farms/{a['id']}", json={"isPrimary": True}, headers=auth_headers)
        r = client.put(f"/api/farms/{b['id']}", json={"isPrimary": True}, headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["ok"] is True

        farms = {f["name"]: f for f in client.get("/api/farms", headers=auth_headers).json()["farms"]}
        assert farms["B"]["isPrimary"] is True
        assert farms["A"]["isPrimary"] is False

    def test_rename_empty_is_invalid(self, client, auth_headers, farm):
        r = client.put(f"/api/farms/{farm['id']}", json={"name": "  "}, headers=auth_headers)
        assert r.status_code == 422

    def test_foreign_or_missing_farm_is_403(self, client, farm, other_headers):
        r = client.get(f"/api/farms/{farm['id']}/map", headers=other_headers)
        assert r.status_code == 403
        assert r.json()["detail"] == "Sin acceso a esa finca."
        assert client.get("/api/farms/99999/map", headers=other_headers).status_code == 403

    def test_delete_farm_cascades(self, client, auth_headers, farm, db_session):
        client.put(
            f"/api/farms/{farm['id']}/map",
            json={"points": [{"name": "Pozo"}], "zones": [{"name": "Potrero"}]},
            headers=auth_headers,
        )
        client.post(
            f"/api/farms/{farm['id']}/tasks",
            json={"title": "Revisar cerca", "start": "2030-01-01", "due": "2030-01-02"},
            headers=auth_headers,
        )

        r = client.delete(f"/api/farms/{farm['id']}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == {"ok": True}

        assert db_session.query(MapPoint).count() == 0
        assert db_session.query(MapZone).count() == 0
        assert db_session.query(Task).count() == 0


class TestMap:
    def test_empty_map(self, client, auth_headers, farm):
        r = client.get(f"/api/farms/{farm['id']}/map", headers=auth_headers)
        assert r.status_code == 200
        data = r.json()
        assert data["farm"]["id"] == farm["id"]
        assert data["points"] == [] and data["lines"] == [] and data["zones"] == []

    def test_save_map_replaces_everything(self, client, auth_headers, farm):
        url = f"/api/farms/{farm['id']}/map"
        first = {
            "view": {"center": [10.0, -84.0], "zoom": 12},
            "points": [{"name": "Pozo", "data": {"lat": 10, "lng": -84}}, {"lat": 1}],
            "lines": [{"name": "", "data": {"coords": [[0, 0], [1, 1]]}}],
            "zones": [{"name": "Potrero", "data": {"poly": []}, "components": {"animales": ["vacas"]}}],
        }
        r = client.put(url, json=first, headers=auth_headers)
        assert r.status_code == 200
        assert r.json() == {"ok": True, "saved": {"points": 2, "lines": 1, "zones": 1}}

        data = client.get(url, headers=auth_headers).json()
        assert data["farm"]["preferredCenter"] == [10.0, -84.0]
        assert [p["name"] for p in data["points"]] == ["Pozo", "Punto"]
        assert data["points"][0]["data"] == {"lat": 10, "lng": -84}
        # Sin `data`, se guarda el item completo
        assert data["points"][1]["data"] == {"lat": 1}
        assert data["lines"][0]["name"] == "Línea"
        assert data["zones"][0]["components"] == {"animales": ["vacas"]}

        r = client.put(url, json={"points": "no-es-lista", "zones": [{"data": {}}]}, headers=auth_headers)
        assert r.json()["saved"] == {"points": 0, "lines": 0, "zones": 1}

        data = client.get(url, headers=auth_headers).json()
        assert data["points"] == []
        assert data["lines"] == []
        assert data["zones"][0]["name"] == "Zona"
        assert data["zones"][0]["components"] == {}
        # Sin view en el segundo guardado, se conserva el anterior
        assert data["farm"]["view"] == {"center": [10.0, -84.0], "zoom": 12}


class TestZoneComponents:
    def _zone_id(self, client, headers, farm_id):
        client.put(
            f"/api/farms/{farm_id}/map",
            json={"zones": [{"name": "Huerta", "components": {"cultivos": ["tomate"]}}]},
            headers=headers,
        )
        return client.get(f"/api/farms/{farm_id}/map", headers=headers).json()["zones"][0]["id"]

    def test_update_components_and_notes_timestamp(self, client, auth_headers, farm):
        zone_id = self._zone_id(client, auth_headers, farm["id"])
        url = f"/api/farms/{farm['id']}/zones/{zone_id}/components"

        r = client.put(url, json={"components": {"cultivos": ["maíz"]}}, headers=auth_headers)
        assert r.status_code == 200
        zone = r.json()["zone"]
        assert zone["components"] == {"cultivos": ["maíz"]}
        assert zone["notesUpdatedAt"] is None

        r = client.put(url, json={"components": {"cultivos": ["maíz"], "notas": "regar lunes"}}, headers=auth_headers)
        assert r.json()["zone"]["notesUpdatedAt"] is not None

    def test_components_null_is_allowed(self, client, auth_headers, farm):
        zone_id = self._zone_id(client, auth_headers, farm["id"])
        r = client.put(
            f"/api/farms/{farm['id']}/zones/{zone_id}/components",
            json={"components": None},
            headers=auth_headers,
        )
        assert r.status_code == 200
        assert r.json()["zone"]["components"] is None

    def test_components_missing_is_422(self, client, auth_headers, farm):
        zone_id = self._zone_id(client, auth_headers, farm["id"])
        r = client.put(f"/api/farms/{farm['id']}/zones/{zone_id}/components", json={}, headers=auth_headers)
        assert r.status_code == 422

    def test_zone_of_other_farm_is_404(self, client, auth_headers, farm):
        zone_id = self._zone_id(client, auth_headers, farm["id"])
        other = client.post("/api/farms", json={"name": "Otra"}, headers=auth_headers).json()["farm"]
        r = client.put(
            f"/api/farms/{other['id']}/zones/{zone_id}/components",
            json={"components": {}},
            headers=auth_headers,
        )
        assert r.status_code == 404
        assert r.json()["detail"] == "Zona no encontrada."
