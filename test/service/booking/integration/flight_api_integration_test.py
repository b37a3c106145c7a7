from datetime import datetime, timedelta, timezone

import httpx
import pytest

from src.service.booking.domain.entity.flight_entity import Flight
from test.constants import FLIGHT_BASE
from test.service.booking.fixtures import create_flight


def _flight_payload(*, flight_number: str = 'FB900', days_out: int = 3) -> dict:
    departure = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=days_out)
    return {
        'flight_number': flight_number,
        'airline': {'name': 'Flight Booking Air', 'code': 'fb'},
        'route': {
            'departure': {
                'airport_code': 'JFK',
                'airport_name': 'John F. Kennedy International',
                'city': 'New York',
                'country': 'USA',
                'time': departure.isoformat(),
                'terminal': '4',
                'gate': 'B22',
            },
            'arrival': {
                'airport_code': 'LAX',
                'airport_name': 'Los Angeles International',
                'city': 'Los Angeles',
                'country': 'USA',
                'time': (departure + timedelta(hours=6)).isoformat(),
            },
        },
        'aircraft_model': 'Boeing 737-800',
        'seat_layout': '3-3',
        'rows': 12,
        'economy_price': 200,
    }


@pytest.mark.integration
class TestCreateFlightApi:
    @pytest.mark.asyncio
    async def test_admin_creates_flight(
        self, client: httpx.AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(FLIGHT_BASE, json=_flight_payload(), headers=admin_headers)

        assert response.status_code == 201
        body = response.json()
        assert body['flight_number'] == 'FB900'
        assert body['airline']['code'] == 'FB'
        assert body['total_seats'] == 72
        assert body['duration_minutes'] == 360
        assert body['fares']['economy'] == {'price': 200.0, 'available_seats': 24}
        assert body['fares']['business']['price'] == 500.0
        assert body['total_available_seats'] == 72

    @pytest.mark.asyncio
    async def test_customer_cannot_create_flight(
        self, client: httpx.AsyncClient, customer_headers: dict[str, str]
    ):
        response = await client.post(FLIGHT_BASE, json=_flight_payload(), headers=customer_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_duplicate_flight_number_conflicts(
        self, client: httpx.AsyncClient, admin_headers: dict[str, str]
    ):
        await client.post(FLIGHT_BASE, json=_flight_payload(), headers=admin_headers)
        response = await client.post(FLIGHT_BASE, json=_flight_payload(), headers=admin_headers)

        assert response.status_code == 409
        assert 'already exists' in response.json()['detail']

    @pytest.mark.asyncio
    async def test_malformed_request(
        self, client: httpx.AsyncClient, admin_headers: dict[str, str]
    ):
        payload = _flight_payload()
        del payload['route']

        response = await client.post(FLIGHT_BASE, json=payload, headers=admin_headers)

        assert response.status_code == 400


@pytest.mark.integration
class TestFlightCatalogApi:
    @pytest.mark.asyncio
    async def test_search_by_city_and_class(self, client: httpx.AsyncClient):
        await create_flight(flight_number='FB101', origin='JFK', destination='LAX')
        await create_flight(flight_number='FB202', origin='SFO', destination='SEA')

        response = await client.get(
            f'{FLIGHT_BASE}/search',
            params={'from': 'new york', 'to': 'lax', 'class': 'business', 'passengers': 2},
        )

        assert response.status_code == 200
        body = response.json()
        assert [flight['flight_number'] for flight in body['flights']] == ['FB101']
        assert body['pagination'] == {
            'page': 1,
            'limit': 10,
            'total': 1,
            'has_next': False,
            'has_prev': False,
        }

    @pytest.mark.asyncio
    async def test_get_flight(self, client: httpx.AsyncClient, flight: Flight):
        response = await client.get(f'{FLIGHT_BASE}/{flight.id}')

        assert response.status_code == 200
        body = response.json()
        assert body['id'] == flight.id
        assert body['route']['departure']['city'] == 'New York'
        assert body['route']['departure']['gate'] == 'B22'

    @pytest.mark.asyncio
    async def test_unknown_flight(self, client: httpx.AsyncClient):
        response = await client.get(f'{FLIGHT_BASE}/999')

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_seat_map_grouped_by_class(self, client: httpx.AsyncClient, flight: Flight):
        response = await client.get(f'{FLIGHT_BASE}/{flight.id}/seats')

        assert response.status_code == 200
        body = response.json()
        assert body['flight_number'] == 'FB101'
        assert len(body['seats']['economy']) == 24
        assert body['seats']['economy'][0]['seat_number'] == '9A'
        assert body['seats']['economy'][0]['is_available'] is True
        assert body['fares']['economy']['available_seats'] == 24

    @pytest.mark.asyncio
    async def test_deactivate_hides_flight(
        self, client: httpx.AsyncClient, flight: Flight, admin_headers: dict[str, str]
    ):
        response = await client.delete(f'{FLIGHT_BASE}/{flight.id}', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['is_active'] is False

        hidden = await client.get(f'{FLIGHT_BASE}/{flight.id}')
        assert hidden.status_code == 400
        assert hidden.json()['detail'] == 'Flight is no longer available'


@pytest.mark.integration
class TestHealthApi:
    @pytest.mark.asyncio
    async def test_health(self, client: httpx.AsyncClient):
        response = await client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'
