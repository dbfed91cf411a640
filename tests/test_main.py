def test_read_main(client):
    response = client.get("/")
    assert response.status_code == 200
    # Đảm bảo message khớp với code trong main.py
    assert response.json() == {"message": "Welcome to the Tuition Settlement API! Visit /docs for API documentation."}
