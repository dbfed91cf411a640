STUDENTS = "/api/v1/students/"

PAYLOAD = {
    "name": "刘爱丽",
    "grade": "初二",
    "phone": "13800138000",
    "is_old_student": True,
    "subjects": ["math", "physics", "english"],
    "remarks": "重点辅导几何",
}


def test_create_and_get_student(client):
    created = client.post(STUDENTS, json=PAYLOAD)
    assert created.status_code == 201
    student_id = created.json()["student_id"]

    data = client.get(f"{STUDENTS}{student_id}").json()
    assert data["name"] == "刘爱丽"
    assert data["subjects"] == ["math", "physics", "english"]
    assert data["is_old_student"] is True


def test_missing_required_fields_rejected(client):
    response = client.post(STUDENTS, json={"name": "", "grade": "初二", "phone": "1"})
    assert response.status_code == 422
    response = client.post(STUDENTS, json={"name": "Bob", "grade": "初二"})
    assert response.status_code == 422
    assert client.get(STUDENTS).json() == []


def test_unknown_subject_rejected(client):
    response = client.post(STUDENTS, json={**PAYLOAD, "subjects": ["history"]})
    assert response.status_code == 422


def test_filter_by_grade_and_subject(client):
    client.post(STUDENTS, json=PAYLOAD)
    client.post(STUDENTS, json={**PAYLOAD, "name": "张波", "grade": "高一", "subjects": ["chinese", "math"]})

    assert [s["name"] for s in client.get(STUDENTS, params={"grade": "高一"}).json()] == ["张波"]
    assert [s["name"] for s in client.get(STUDENTS, params={"subject": "chinese"}).json()] == ["张波"]
    assert len(client.get(STUDENTS, params={"subject": "math"}).json()) == 2


def test_update_student(client):
    student_id = client.post(STUDENTS, json=PAYLOAD).json()["student_id"]
    response = client.put(f"{STUDENTS}{student_id}", json={"is_old_student": False, "subjects": ["chemistry"]})
    assert response.status_code == 200
    assert response.json()["is_old_student"] is False
    assert response.json()["subjects"] == ["chemistry"]
    assert response.json()["name"] == "刘爱丽"


def test_delete_student_removes_records(client):
    student_id = client.post(STUDENTS, json=PAYLOAD).json()["student_id"]
    client.post("/api/v1/records/batch", json=[
        {"student_id": student_id, "subject": "math", "record_date": "2024-03-05", "count": 2}
    ])

    response = client.delete(f"{STUDENTS}{student_id}")
    assert response.status_code == 200
    assert response.json()["status"] == "success"
    assert client.get(f"{STUDENTS}{student_id}").status_code == 404
    assert client.get("/api/v1/records/").json() == []


def test_unknown_student_returns_404(client):
    assert client.get(f"{STUDENTS}42").status_code == 404
    assert client.put(f"{STUDENTS}42", json={"name": "x"}).status_code == 404
    assert client.delete(f"{STUDENTS}42").status_code == 404


def test_update_rejects_null_required_fields(client):
    student_id = client.post(STUDENTS, json=PAYLOAD).json()["student_id"]

    for field in ("name", "grade", "phone", "is_old_student", "subjects"):
        response = client.put(f"{STUDENTS}{student_id}", json={field: None})
        assert response.status_code == 422, field

    data = client.get(f"{STUDENTS}{student_id}").json()
    assert data["name"] == "刘爱丽"
    assert data["grade"] == "初二"
    assert data["subjects"] == ["math", "physics", "english"]


def test_update_allows_clearing_optional_fields(client):
    student_id = client.post(STUDENTS, json={**PAYLOAD, "wechat": "liu_ai"}).json()["student_id"]
    response = client.put(f"{STUDENTS}{student_id}", json={"wechat": None, "remarks": None})
    assert response.status_code == 200
    assert response.json()["wechat"] is None
    assert response.json()["remarks"] is None


def test_update_dedupes_subjects(client):
    student_id = client.post(STUDENTS, json=PAYLOAD).json()["student_id"]
    response = client.put(f"{STUDENTS}{student_id}", json={"subjects": ["math", "chinese", "math"]})
    assert response.status_code == 200
    assert response.json()["subjects"] == ["math", "chinese"]


def test_delete_student_reports_utc_timestamp(client):
    student_id = client.post(STUDENTS, json=PAYLOAD).json()["student_id"]
    response = client.delete(f"{STUDENTS}{student_id}")
    assert response.json()["deleted_at"].endswith("+00:00")
