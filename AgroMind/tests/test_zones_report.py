from datetime import date, datetime
from types import SimpleNamespace

from services.zone_report_service import build_zones_report

NOW = datetime(2030, 5, 1, 8, 0, 0)


def make_zone(id, name, components=None):
    return SimpleNamespace(id=id, name=name, components=components,
                           created_at=NOW, updated_at=NOW, notes_updated_at=None)


def make_task(id, zone, due, status="Pendiente"):
    return SimpleNamespace(id=id, title=f"T{id}", zone=zone, status=status, due=due,
                           priority="Media", type="Mantenimiento")


def test_tasks_matched_by_normalized_zone_name():
    farm = SimpleNamespace(id=1, name="La Esperanza")
    zones = [make_zone(10, "Lote Café", {"cultivos": ["café"], "notas": "sombra"}), make_zone(11, "Potrero")]
    tasks = [
        make_task(1, "lote cafe", date(2030, 5, 9)),
        make_task(2, "LOTE CAFÉ", date(2030, 5, 3)),
        make_task(3, "Lote Café", date(2030, 5, 1), status="Completada"),
        make_task(4, None, date(2030, 5, 2)),
    ]
    report = build_zones_report(farm, zones, tasks)

    assert report["ok"] is True
    assert report["farm"] == {"id": 1, "name": "La Esperanza"}
    assert report["zones_count"] == 2
    assert report["active_tasks_count"] == 3

    cafe, potrero = report["report"]
    assert [t["id"] for t in cafe["active_tasks"]] == [2, 1]
    assert cafe["active_tasks_count"] == 2
    assert cafe["components_summary"] == {"has_animals": False, "has_crops": True, "keys": ["cultivos", "notas"]}

    assert potrero["components"] == {}
    assert potrero["active_tasks"] == []
    assert potrero["components_summary"]["keys"] == []


def test_task_list_and_keys_are_capped():
    farm = SimpleNamespace(id=1, name="F")
    components = {f"k{i}": i for i in range(40)}
    zones = [make_zone(1, "Grande", components)]
    tasks = [make_task(i, "Grande", date(2030, 6, 1 + i)) for i in range(15)]
    entry = build_zones_report(farm, zones, tasks)["report"][0]
    assert entry["active_tasks_count"] == 15
    assert len(entry["active_tasks"]) == 12
    assert len(entry["components_summary"]["keys"]) == 30


def test_zones_report_endpoint(client, auth_headers, farm):
    base = f"/api/farms/{farm['id']}"
    client.put(
        f"{base}/map",
        json={"zones": [{"name": "Corral", "components": {"animales": ["cerdos"]}}, {"name": "Huerta"}]},
        headers=auth_headers,
    )
    client.post(f"{base}/tasks", json={"title": "Limpiar corral", "zone": "corral",
                                       "start": "2030-03-01", "due": "2030-03-02"}, headers=auth_headers)

    r = client.get(f"{base}/zones/report", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["zonesCount"] == 2
    assert data["activeTasksCount"] == 1
    corral = data["report"][0]
    assert corral["name"] == "Corral"
    assert corral["componentsSummary"]["hasAnimals"] is True
    assert corral["activeTasks"][0]["title"] == "Limpiar corral"
    assert corral["activeTasks"][0]["due"] == "2030-03-02"
    assert "notesUpdatedAt" in corral
    assert data["report"][1]["activeTasksCount"] == 0


def test_zones_report_forbidden_for_other_user(client, farm, other_headers):
    r = client.get(f"/api/farms/{farm['id']}/zones/report", headers=other_headers)
    assert r.status_code == 403
