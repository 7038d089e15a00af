def test_documentation_page_is_served(client):
    response = client.get("/documentation.html")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/users/{username}/movies/{movieId}" in response.text


def test_root_still_returns_welcome_text(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "/documentation.html" in response.text


def test_unknown_path_is_404(client):
    assert client.get("/no-such-page.html").status_code == 404


def test_static_mount_does_not_bypass_auth(client):
    assert client.get("/movies").status_code == 401
