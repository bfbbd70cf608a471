"""Tests for the hello example."""

from synth.testing import TestClient


class TestHello:
    """Verify routing, parameters and the default 404."""

    async def test_index(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Hello, synthesizers!"

    async def test_person_name(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/person/alice")
            assert response.status == 200
            assert response.text == "Hello, alice"

    async def test_trailing_slash(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/hey/")
            assert response.status == 200
            assert response.text == "yo"

    async def test_login_form(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/login")
            assert response.status == 200
            assert response.headers["content-type"] == "text/html; charset=UTF-8"
            assert '<form action="/login" method="POST">' in response.text

    async def test_login_echoes_body(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.post("/login", body=b"username=alice&password=s3cr3t")
            assert response.status == 200
            assert response.body == b"username=alice&password=s3cr3t"

    async def test_login_echoes_chunked_body(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.post("/login", chunks=[b"user", b"name=", b"bob"])
            assert response.body == b"username=bob"

    async def test_unknown_path(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.get("/nope")
            assert response.status == 404
            assert response.text == "404 Page not found."
            assert response.headers["content-type"] == "text/plain; charset=UTF-8"

    async def test_wrong_method(self, example_server) -> None:
        async with TestClient(example_server) as client:
            response = await client.delete("/hello")
            assert response.status == 404
