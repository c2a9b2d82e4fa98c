import pytest


@pytest.fixture
def tasks_url(farm):
    return f"/api/farms/{farm['id']}/tasks"


def _task(**overrides):
    body = {"title": "Revisar cerca", "start": "2030-03-01", "due": "2030-03-05"}
    body.update(overrides)
    return body


class TestCreateTask:
    def test_defaults(self, client, auth_headers, tasks_url):
        r = client.post(tasks_url, json=_task(zone="  Potrero 1 ", owner=""), headers=auth_headers)
        assert r.status_code == 201
        task = r.json()["task"]
        assert task["title"] == "Revisar cerca"
        assert task["zone"] == "Potrero 1"
        assert task["owner"] is None
        assert task["type"] == "Mantenimiento"
        assert task["priority"] == "Media"
        assert task["status"] == "Pendiente"
        assert task["start"] == "2030-03-01"
        assert task["due"] == "2030-03-05"

    def test_title_required(self, client, auth_headers, tasks_url):
        r = client.post(tasks_url, json=_task(title="   "), headers=auth_headers)
        assert r.status_code == 422
        assert "title es requerido." in r.text

    @pytest.mark.parametrize("field,value", [
        ("start", "01/03/2030"),
        ("due", "2030-02-30"),
        ("due", None),
    ])
    def test_dates_must_be_yyyy_mm_dd(self, client, auth_headers, tasks_url, field, value):
        r = client.post(tasks_url, json=_task(**{field: value}), headers=auth_headers)
        assert r.status_code == 422
        assert f"{field} debe ser YYYY-MM-DD." in r.text

    def test_start_after_due_is_400(self, client, auth_headers, tasks_url):
        r = client.post(tasks_url, json=_task(start="2030-03-10", due="2030-03-05"), headers=auth_headers)
        assert r.status_code == 400
        assert r.json()["detail"] == "start no puede ser posterior a due."

    def test_other_user_gets_403(self, client, other_headers, tasks_url):
        assert client.post(tasks_url, json=_task(), headers=other_headers).status_code == 403
        assert client.get(tasks_url, headers=other_headers).status_code == 403


class TestListUpdateDelete:
    def test_list_ordered_by_due(self, client, auth_headers, tasks_url):
        client.post(tasks_url, json=_task(title="Tarde", due="2030-03-20"), headers=auth_headers)
        client.post(tasks_url, json=_task(title="Pronto", due="2030-03-02"), headers=auth_headers)
        client.post(tasks_url, json=_task(title="Medio", due="2030-03-10"), headers=auth_headers)

        r = client.get(tasks_url, headers=auth_headers)
        assert [t["title"] for t in r.json()["tasks"]] == ["Pronto", "Medio", "Tarde"]

    def test_partial_update(self, client, auth_headers, tasks_url):
        task = client.post(tasks_url, json=_task(), headers=auth_headers).json()["task"]

        r = client.put(f"{tasks_url}/{task['id']}", json={"status": "Completada"}, headers=auth_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["ok"] is True
        assert body["task"]["status"] == "Completada"
        assert body["task"]["title"] == "Revisar cerca"

    def test_update_checks_merged_dates(self, client, auth_headers, tasks_url):
        task = client.post(tasks_url, json=_task(), headers=auth_headers).json()["task"]
        # due nuevo anterior al start guardado
        r = client.put(f"{tasks_url}/{task['id']}", json={"due": "2030-02-01"}, headers=auth_headers)
        assert r.status_code == 400

        r = client.put(f"{tasks_url}/{task['id']}", json={"title": ""}, headers=auth_headers)
        assert r.status_code == 422

    def test_update_and_delete_task_of_other_farm_is_404(self, client, auth_headers, tasks_url):
        task = client.post(tasks_url, json=_task(), headers=auth_headers).json()["task"]
        other = client.post("/api/farms", json={"name": "Otra"}, headers=auth_headers).json()["farm"]
        other_url = f"/api/farms/{other['id']}/tasks/{task['id']}"

        r = client.put(other_url, json={"title": "X"}, headers=auth_headers)
        assert r.status_code == 404
        assert r.json()["detail"] == "Tarea no encontrada."
        assert client.delete(other_url, headers=auth_headers).status_code == 404

    def test_delete(self, client, auth_headers, tasks_url):
        task = client.post(tasks_url, json=_task(), headers=auth_headers).json()["task"]
        r = client.delete(f"{tasks_url}/{task['id']}", headers=auth_headers)
        assert r.json() == {"ok": True}
        assert client.get(tasks_url, headers=auth_headers).json()["tasks"] == []
