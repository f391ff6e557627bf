"""API tests for the transaction table and dashboard chart endpoints."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from tests.utils.factories import create_transaction_factory
from transaction_dashboard.core.exceptions import QueryFailedError
from transaction_dashboard.db.session import get_session_factory
from transaction_dashboard.transactions.dependencies import get_configured_price_ranges
from transaction_dashboard.transactions.services.analytics import PriceHistogramService

API = "/api/v1"


class TestListTransactionsRoute:
    """Tests for GET /api/v1/transactions."""

    @pytest.mark.asyncio
    async def test_second_page(self, test_client, january_transactions):
        response = await test_client.get(
            f"{API}/transactions",
            params={"month": "January", "year": 2021, "page": 2, "perPage": 2},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 2
        assert data["perPage"] == 2
        assert [t["id"] for t in data["transactions"]] == [3]
        assert data["transactions"][0] == {
            "id": 3,
            "title": "Rain Jacket",
            "description": "Sample product",
            "price": 80.0,
            "dateOfSale": "2021-01-31",
            "category": "men's clothing",
            "sold": False,
            "image": None,
        }

    @pytest.mark.asyncio
    async def test_defaults_to_first_page_of_ten(self, test_client, january_transactions):
        response = await test_client.get(f"{API}/transactions", params={"month": "jan"})

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["perPage"] == 10
        assert data["total"] == 3

    @pytest.mark.asyncio
    async def test_search(self, test_client, january_transactions):
        response = await test_client.get(
            f"{API}/transactions", params={"month": "January", "search": "GOLD"}
        )

        assert response.status_code == 200
        assert [t["title"] for t in response.json()["transactions"]] == ["Solid Gold Bracelet"]

    @pytest.mark.asyncio
    async def test_invalid_month(self, test_client, january_transactions):
        response = await test_client.get(f"{API}/transactions", params={"month": "Foo"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "INVALID_MONTH"
        assert data["error"]["details"] == {"month": "Foo"}
        assert "transactions" not in data

    @pytest.mark.asyncio
    async def test_missing_month(self, test_client):
        response = await test_client.get(f"{API}/transactions")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MONTH"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{"page": 0}, {"perPage": 0}, {"perPage": 1000}])
    async def test_rejects_bad_paging(self, test_client, params):
        response = await test_client.get(f"{API}/transactions", params={"month": "May", **params})

        assert response.status_code == 422


class TestStatisticsRoute:
    """Tests for GET /api/v1/statistics."""

    @pytest.mark.asyncio
    async def test_january_statistics(self, test_client, january_transactions):
        response = await test_client.get(
            f"{API}/statistics", params={"month": "January", "year": 2021}
        )

        assert response.status_code == 200
        assert response.json() == {
            "totalSaleAmount": 200,
            "totalSoldItems": 2,
            "totalNotSoldItems": 1,
        }

    @pytest.mark.asyncio
    async def test_year_narrows_the_month(self, test_client, db_session, january_transactions):
        create_transaction_factory(
            db_session, id=90, price=10, sold=True, date_of_sale=date(2022, 1, 14)
        )

        all_years = await test_client.get(f"{API}/statistics", params={"month": "January"})
        only_2022 = await test_client.get(
            f"{API}/statistics", params={"month": "January", "year": 2022}
        )

        assert all_years.json()["totalSoldItems"] == 3
        assert only_2022.json() == {
            "totalSaleAmount": 10,
            "totalSoldItems": 1,
            "totalNotSoldItems": 0,
        }

    @pytest.mark.asyncio
    async def test_non_ascii_digit_month(self, test_client):
        response = await test_client.get(f"{API}/statistics", params={"month": "²"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MONTH"

    @pytest.mark.asyncio
    async def test_invalid_year(self, test_client):
        response = await test_client.get(
            f"{API}/statistics", params={"month": "January", "year": 0}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MONTH"


class TestBarChartRoute:
    """Tests for GET /api/v1/bar-chart."""

    @pytest.mark.asyncio
    async def test_requested_ranges(self, test_client, january_transactions):
        response = await test_client.get(
            f"{API}/bar-chart",
            params=[("month", "January"), ("range", "0-100"), ("range", "101-200")],
        )

        assert response.status_code == 200
        assert response.json() == [
            {"range": "0-100", "count": 2},
            {"range": "101-200", "count": 1},
        ]

    @pytest.mark.asyncio
    async def test_configured_ranges(self, test_client, january_transactions):
        response = await test_client.get(f"{API}/bar-chart", params={"month": "January"})

        assert response.status_code == 200
        data = response.json()
        configured = get_configured_price_ranges()
        assert [bar["range"] for bar in data] == [r.label for r in configured]
        assert len(data) == len(configured)
        assert sum(bar["count"] for bar in data) == 3

    @pytest.mark.asyncio
    async def test_inverted_range(self, test_client):
        response = await test_client.get(
            f"{API}/bar-chart", params={"month": "January", "range": "300-200"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PRICE_RANGE"

    @pytest.mark.asyncio
    async def test_nan_bound_is_rejected(self, test_client):
        response = await test_client.get(
            f"{API}/bar-chart", params={"month": "January", "range": "nan-100"}
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"range": "nan-100"}

    @pytest.mark.asyncio
    async def test_query_failure_is_a_server_error(self, test_client):
        def failing(db, window, ranges):
            raise QueryFailedError("histogram", window.as_params())

        with patch.object(PriceHistogramService, "get_histogram", failing):
            response = await test_client.get(f"{API}/bar-chart", params={"month": "June"})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "QUERY_FAILED"
        assert error["details"] == {"operation": "histogram", "month": 6, "year": None}


class TestPieChartRoute:
    """Tests for GET /api/v1/pie-chart."""

    @pytest.mark.asyncio
    async def test_january_categories(self, test_client, january_transactions):
        response = await test_client.get(f"{API}/pie-chart", params={"month": "January"})

        assert response.status_code == 200
        assert response.json() == [
            {"category": "jewelery", "count": 1},
            {"category": "men's clothing", "count": 2},
        ]


class TestCombinedDataRoute:
    """Tests for GET /api/v1/combined-data."""

    @pytest.mark.asyncio
    async def test_combined_matches_individual_endpoints(self, test_client, january_transactions):
        params = [("month", "January"), ("range", "0-100"), ("range", "101-200")]

        combined = await test_client.get(f"{API}/combined-data", params=params)
        statistics = await test_client.get(f"{API}/statistics", params=params[:1])
        bar_chart = await test_client.get(f"{API}/bar-chart", params=params)
        pie_chart = await test_client.get(f"{API}/pie-chart", params=params[:1])

        assert combined.status_code == 200
        assert combined.json() == {
            "statistics": statistics.json(),
            "barChart": bar_chart.json(),
            "pieChart": pie_chart.json(),
        }
        assert combined.json()["barChart"] == [
            {"range": "0-100", "count": 2},
            {"range": "101-200", "count": 1},
        ]

    @pytest.mark.asyncio
    async def test_invalid_month_returns_no_data(self, test_client, january_transactions):
        response = await test_client.get(f"{API}/combined-data", params={"month": "Foo"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "INVALID_MONTH"
        assert "statistics" not in data

    @pytest.mark.asyncio
    async def test_branch_failure_fails_the_request(self, test_client, january_transactions):
        def failing(db, window, ranges):
            raise QueryFailedError("histogram", window.as_params())

        with patch.object(PriceHistogramService, "get_histogram", failing):
            response = await test_client.get(
                f"{API}/combined-data", params={"month": "January", "year": 2021}
            )

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "AGGREGATION_FAILED"
        assert data["error"]["details"]["failed"] == ["barChart"]
        assert data["error"]["details"]["causes"] == {"barChart": "QUERY_FAILED"}


class TestHealthRoutes:
    """Tests for service-level endpoints."""

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_health_with_reachable_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "healthy"}

    @pytest.mark.asyncio
    async def test_health_degraded_when_database_is_down(self, test_app, test_client):
        session_factory = MagicMock()
        session = session_factory.return_value.__enter__.return_value
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))
        test_app.dependency_overrides[get_session_factory] = lambda: session_factory

        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "degraded", "database": "unhealthy"}
