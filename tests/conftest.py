import pytest
from fastapi.testclient import TestClient

from carpool.config import Settings
from carpool.database import Base
from carpool.main import create_app

PREFIX = "/api/v1"


def make_settings(**overrides) -> Settings:
    values = {
        "DATABASE_URL": "sqlite://",
        "SECRET_KEY": "test-secret-key",
        "APP_ENV": "test",
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class Api:
    """Thin wrapper over TestClient for the flows most tests share."""

    def __init__(self, client: TestClient):
        self.client = client

    @staticmethod
    def auth(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    def register(self, name: str, email: str, is_driver: bool = False) -> dict:
        response = self.client.post(f"{PREFIX}/auth/register", json={
            "fullName": name,
            "email": email,
            "phone": "+7 900 000 00 00",
            "password": "secret123",
            "isDriver": is_driver,
        })
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"id": data["user"]["id"], "token": data["token"], "headers": self.auth(data["token"])}

    def create_trip(self, driver: dict, **overrides) -> dict:
        body = {
            "fromCity": "Moscow",
            "toCity": "Saint Petersburg",
            "tripDate": "2026-11-20",
            "tripTime": "09:30",
            "price": 100,
            "seats": 3,
        }
        body.update(overrides)
        response = self.client.post(f"{PREFIX}/trips", json=body, headers=driver["headers"])
        assert response.status_code == 201, response.text
        return response.json()["data"]

    def book(self, passenger: dict, trip_id: int, seats: int):
        return self.client.post(f"{PREFIX}/bookings", json={"tripId": trip_id, "seatsBooked": seats},
                                headers=passenger["headers"])

    def decide(self, driver: dict, booking_id: int, status: str):
        return self.client.patch(f"{PREFIX}/bookings/{booking_id}/status", json={"status": status},
                                 headers=driver["headers"])

    def get_trip(self, trip_id: int) -> dict:
        response = self.client.get(f"{PREFIX}/trips/{trip_id}")
        assert response.status_code == 200, response.text
        return response.json()["data"]

    def confirmed_booking(self, driver: dict, passenger: dict, trip_id: int, seats: int = 1) -> int:
        booking_id = self.book(passenger, trip_id, seats).json()["data"]["id"]
        assert self.decide(driver, booking_id, "confirmed").status_code == 200
        return booking_id


@pytest.fixture()
def app():
    application = create_app(make_settings())
    engine = application.state.context.engine
    Base.metadata.create_all(bind=engine)
    yield application
    Base.metadata.drop_all(bind=engine)
    application.state.context.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def api(client):
    return Api(client)


@pytest.fixture()
def driver(api):
    return api.register("Dmitry Driver", "driver@example.com", is_driver=True)


@pytest.fixture()
def passenger(api):
    return api.register("Pavel Passenger", "pavel@example.com")


@pytest.fixture()
def other_passenger(api):
    return api.register("Quinn Passenger", "quinn@example.com")
