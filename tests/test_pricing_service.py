"""End-to-end tests for the pricing engine entry points."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from tour_pricing import (
    AmbiguousPeriodError,
    EmptySelectionError,
    InvalidMarkupError,
    NoMatchingPeriodError,
    TourPricingEngine,
    compute_itinerary_pricing,
    compute_itinerary_pricing_async,
    resolve_template_pricing,
    resolve_template_pricing_async,
)
from tour_pricing.clients import InMemoryRateLookup
from tour_pricing.models import (
    ComponentSelection,
    LineItemKind,
    RateLookupRow,
    TemplateCriteria,
)
from tour_pricing.services.pipeline import Pipeline, PipelineStep, PricingContext


CRITERIA = {
    "templateId": "kashmir-5n",
    "dateFrom": "2025-01-05",
    "dateTo": "2025-01-10",
    "mealPlanId": "CP",
    "roomCount": 3,
}


class CountingLookup:
    """Wraps a lookup and counts the calls made to it."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = 0

    def room_rate(self, *args):
        self.calls += 1
        return self.inner.room_rate(*args)

    def vehicle_rate(self, *args):
        self.calls += 1
        return self.inner.vehicle_rate(*args)


class AsyncLookup:
    """Wraps a lookup behind coroutines that yield to the event loop."""

    def __init__(self, inner):
        self.inner = inner

    async def room_rate(self, *args):
        await asyncio.sleep(0)
        return self.inner.room_rate(*args)

    async def vehicle_rate(self, *args):
        await asyncio.sleep(0)
        return self.inner.vehicle_rate(*args)


class TestItineraryPricing:
    """Tests for itinerary pricing from nightly rates."""

    def test_two_day_itinerary(self, two_day_itinerary_data, rate_lookup):
        """Test the accommodation, transport and grand totals of two days."""
        result = compute_itinerary_pricing(two_day_itinerary_data, rate_lookup)

        assert result.accommodation_subtotal == Decimal("4200")
        assert result.transport_subtotal == Decimal("800")
        assert result.total_cost == Decimal("5000")
        assert result.applied_markup is None
        assert result.is_complete
        assert [day.day_number for day in result.day_breakdown] == [1, 2]
        assert result.day_breakdown[0].day_total == Decimal("3800")
        assert result.day_breakdown[1].day_total == Decimal("1200")

    def test_period_breakdown(self, two_day_itinerary, rate_lookup):
        """Test the seasonal breakdown covers both nights of March."""
        result = compute_itinerary_pricing(two_day_itinerary, rate_lookup)

        assert len(result.period_breakdown) == 1
        period = result.period_breakdown[0]
        assert period.valid_from == date(2025, 3, 1)
        assert period.nights == 2
        assert period.total == Decimal("4200")

    def test_markup(self, two_day_itinerary, rate_lookup):
        """Test markup is applied on top of the subtotals."""
        result = compute_itinerary_pricing(two_day_itinerary, rate_lookup, markup_percent="10")

        assert result.base_total == Decimal("5000")
        assert result.applied_markup.amount == Decimal("500")
        assert result.total_cost == Decimal("5500")

    def test_missing_rate_reported(self, two_day_itinerary_data, rate_lookup):
        """Test a missing rate is reported and everything else is priced."""
        two_day_itinerary_data[1]["roomAllocations"].append(
            {"roomTypeId": "Suite", "occupancyTypeId": "Double", "mealPlanId": "CP",
             "quantity": 1, "dayNumber": 2}
        )
        two_day_itinerary_data[0]["transportDetails"].append(
            {"vehicleTypeId": "Helicopter", "quantity": 1, "dayNumber": 1}
        )

        result = compute_itinerary_pricing(two_day_itinerary_data, rate_lookup)

        assert not result.is_complete
        assert [failure.lookup_key() for failure in result.failures] == [
            ("Helicopter", date(2025, 3, 10)),
            ("Suite", "Double", "CP", date(2025, 3, 11)),
        ]
        assert result.total_cost == Decimal("5000")

    def test_empty_itinerary(self, rate_lookup):
        """Test an itinerary without days prices to zero."""
        result = compute_itinerary_pricing([], rate_lookup)

        assert result.total_cost == Decimal("0")
        assert result.day_breakdown == ()

    def test_invalid_markup_rejected_before_lookups(self, two_day_itinerary, rate_lookup):
        """Test a negative markup fails without calling the rate lookup."""
        lookup = CountingLookup(rate_lookup)

        with pytest.raises(InvalidMarkupError):
            compute_itinerary_pricing(two_day_itinerary, lookup, markup_percent=-10)

        assert lookup.calls == 0

    def test_result_serialization(self, two_day_itinerary, rate_lookup):
        """Test the rendered result uses rounded decimal strings."""
        rendered = compute_itinerary_pricing(two_day_itinerary, rate_lookup).to_dict()

        assert rendered["total_cost"] == "5000.00"
        assert rendered["day_breakdown"][0]["line_items"][0]["total_price"] == "3000.00"
        assert rendered["day_breakdown"][0]["line_items"][1]["kind"] == "transport"
        assert rendered["failures"] == []

    @pytest.mark.asyncio
    async def test_async_rate_lookup(self, two_day_itinerary, rate_rows):
        """Test an asynchronous rate collaborator gives the same totals."""
        lookup = AsyncLookup(InMemoryRateLookup(rate_rows))

        result = await compute_itinerary_pricing_async(two_day_itinerary, lookup)

        assert result.total_cost == Decimal("5000")

    @pytest.mark.asyncio
    async def test_concurrent_computations_are_independent(self, rate_lookup):
        """Test per-trip charges do not leak between computations."""
        days = [
            {"dayNumber": 1, "date": "2025-03-10",
             "transportDetails": [{"vehicleTypeId": "Tempo Traveller", "dayNumber": 1}]},
            {"dayNumber": 2, "date": "2025-03-11",
             "transportDetails": [{"vehicleTypeId": "Tempo Traveller", "dayNumber": 2}]},
        ]
        engine = TourPricingEngine()
        lookup = AsyncLookup(rate_lookup)

        first, second = await asyncio.gather(
            engine.price_itinerary(days, lookup),
            engine.price_itinerary(days, lookup),
        )

        assert first.transport_subtotal == Decimal("5000")
        assert second.transport_subtotal == Decimal("5000")

    @pytest.mark.asyncio
    async def test_sync_entry_inside_event_loop(self, two_day_itinerary, rate_lookup):
        """Test the blocking entry point refuses to run inside an event loop."""
        with pytest.raises(RuntimeError, match="compute_itinerary_pricing_async"):
            compute_itinerary_pricing(two_day_itinerary, rate_lookup)

    def test_stay_crossing_seasons(self, rate_lookup):
        """Test a stay over a season change is split between both periods."""
        days = [
            {"dayNumber": 1, "date": "2025-03-30", "nights": 3,
             "roomAllocations": [{"roomTypeId": "Deluxe", "occupancyTypeId": "Double",
                                  "mealPlanId": "CP", "quantity": 1, "dayNumber": 1}]},
        ]

        result = compute_itinerary_pricing(days, rate_lookup)

        assert [(period.valid_from, period.nights, period.total) for period in result.period_breakdown] == [
            (date(2025, 3, 1), 2, Decimal("3000")),
            (date(2025, 4, 1), 1, Decimal("1700")),
        ]
        assert result.accommodation_subtotal == Decimal("4700")
        rendered = result.to_dict()["day_breakdown"][0]["line_items"][0]
        assert [night["period_from"] for night in rendered["night_rates"]] == [
            "2025-03-01",
            "2025-03-01",
            "2025-04-01",
        ]

    def test_line_item_period_rendered(self, two_day_itinerary, rate_lookup):
        """Test rendered line items carry the window of their rate."""
        rendered = compute_itinerary_pricing(two_day_itinerary, rate_lookup).to_dict()

        room, vehicle = rendered["day_breakdown"][0]["line_items"]
        assert (room["period_from"], room["period_to"]) == ("2025-03-01", "2025-03-31")
        assert (vehicle["period_from"], vehicle["period_to"]) == ("2025-01-01", "2025-12-31")
        assert "rate_meal_plan_id" not in room

    def test_meal_supplements(self, two_day_itinerary_data, rate_lookup):
        """Test meals outside the CP plan are charged on top of the rooms."""
        two_day_itinerary_data[0]["mealsIncluded"] = ["Breakfast", "Lunch", "Dinner"]

        result = compute_itinerary_pricing(two_day_itinerary_data, rate_lookup)

        meal = result.day_breakdown[0].line_items[1]
        assert meal.kind == LineItemKind.MEAL
        assert meal.label == "Deluxe - Meals (Lunch, Dinner)"
        assert result.meal_subtotal == Decimal("2100")
        assert result.accommodation_subtotal == Decimal("6300")
        assert result.total_cost == Decimal("7100")
        assert [period.total for period in result.period_breakdown] == [Decimal("4200")]

    def test_meal_plan_without_rates_fails(self, two_day_itinerary_data, rate_rows):
        """Test a meal plan with no rates is reported instead of priced at another plan."""
        two_day_itinerary_data[1]["roomAllocations"][0]["mealPlanId"] = "AP"

        result = compute_itinerary_pricing(two_day_itinerary_data, InMemoryRateLookup(rate_rows))

        assert not result.is_complete
        assert [failure.lookup_key() for failure in result.failures] == [
            ("Deluxe", "Single", "AP", date(2025, 3, 11)),
        ]
        assert result.accommodation_subtotal == Decimal("3000")

    def test_meal_plan_fallback_reported(self, two_day_itinerary_data, rate_rows):
        """Test an opted-in fallback names the meal plan the rate was taken from."""
        two_day_itinerary_data[1]["roomAllocations"][0]["mealPlanId"] = "AP"
        lookup = InMemoryRateLookup(rate_rows, meal_plan_fallback=True)

        result = compute_itinerary_pricing(two_day_itinerary_data, lookup)

        assert result.is_complete
        room = result.to_dict()["day_breakdown"][1]["line_items"][0]
        assert room["rate_meal_plan_id"] == "CP"
        assert room["label"] == "Deluxe / Single / AP (rate: CP)"


class TestTemplatePricing:
    """Tests for template pricing against the price catalog."""

    def test_template_line_total(self, template_entries_data):
        """Test the matched entry's components are priced with multipliers."""
        result = resolve_template_pricing(
            template_entries_data,
            CRITERIA,
            {"components": [{"componentId": "dbl", "quantity": 3}]},
        )

        assert result.accommodation_subtotal == Decimal("6000")
        assert result.total_cost == Decimal("6000")
        assert result.day_breakdown == ()
        assert result.template_items[0].kind == LineItemKind.TEMPLATE
        assert result.template_items[0].period_from == date(2025, 1, 1)

    @pytest.mark.asyncio
    async def test_template_inside_event_loop(self, template_entries):
        """Test the blocking template entry point works from async code."""
        result = resolve_template_pricing(
            template_entries,
            CRITERIA,
            {"components": [{"componentId": "dbl", "quantity": 3}]},
        )

        assert result.total_cost == Decimal("6000")

    @pytest.mark.asyncio
    async def test_template_async_entry(self, template_entries):
        """Test the awaitable template entry point gives the same result."""
        result = await resolve_template_pricing_async(
            template_entries,
            CRITERIA,
            {"components": [{"componentId": "dbl", "quantity": 3}]},
            markup_percent="10",
        )

        assert result.base_total == Decimal("6000")
        assert result.total_cost == Decimal("6600")

    def test_template_markup(self, template_entries):
        """Test markup also applies to template pricing."""
        result = resolve_template_pricing(
            template_entries,
            CRITERIA,
            {"components": [{"componentId": "dbl", "quantity": 1},
                            {"componentId": "sgl", "quantity": 1}]},
            markup_percent="20",
        )

        assert result.base_total == Decimal("3500")
        assert result.total_cost == Decimal("4200")

    def test_no_matching_period(self, template_entries):
        """Test criteria outside every window fail with NoMatchingPeriod."""
        criteria = dict(CRITERIA, dateFrom="2025-12-01", dateTo="2025-12-05")

        with pytest.raises(NoMatchingPeriodError):
            resolve_template_pricing(template_entries, criteria, {"components": [{"componentId": "dbl"}]})

    def test_ambiguous_period(self, template_entries):
        """Test overlapping windows fail and are never auto-resolved."""
        criteria = {
            "templateId": "kashmir-5n",
            "dateFrom": "2025-04-01",
            "dateTo": "2025-04-05",
            "mealPlanId": "MAP",
            "roomCount": 2,
        }

        with pytest.raises(AmbiguousPeriodError) as exc_info:
            resolve_template_pricing(template_entries, criteria, {"components": [{"componentId": "dbl"}]})

        assert sorted(exc_info.value.conflicting_ids) == ["p-4", "p-5"]

    def test_empty_selection(self, template_entries):
        """Test selecting no components fails."""
        with pytest.raises(EmptySelectionError):
            resolve_template_pricing(template_entries, CRITERIA, {"components": []})

    @pytest.mark.asyncio
    async def test_engine_records_error_on_context(self, template_entries):
        """Test a failed step stops the pipeline before totals are built."""
        engine = TourPricingEngine()
        context = PricingContext()
        context.entries = template_entries
        context.criteria = TemplateCriteria(**dict(CRITERIA, mealPlanId="AP"))
        context.selection = ComponentSelection(components=[{"componentId": "dbl"}])

        await engine.template_pipeline.execute(context)

        assert not context.success
        assert context.result is None
        assert context.errors[0]["step"] == "MatchPeriod"
        assert list(context.step_timings) == ["MatchPeriod"]
        with pytest.raises(NoMatchingPeriodError):
            context.raise_for_errors()


class TestPipeline:
    """Tests for the pipeline executor."""

    def test_step_names(self):
        """Test both pipelines list their steps in execution order."""
        engine = TourPricingEngine()

        assert engine.template_pipeline.get_step_names() == [
            "MatchPeriod",
            "PriceTemplate",
            "AggregateDays",
            "AggregateTotals",
        ]
        assert engine.itinerary_pipeline.get_step_names() == [
            "PriceItinerary",
            "AggregateDays",
            "AggregateTotals",
        ]

    @pytest.mark.asyncio
    async def test_optional_step_failure_continues(self):
        """Test an optional step returning False does not stop the pipeline."""
        ran = []

        class Skippable(PipelineStep):
            async def execute(self, context):
                ran.append(self.name)
                return False

            def is_required(self):
                return False

        class Final(PipelineStep):
            async def execute(self, context):
                ran.append(self.name)
                return True

        context = await Pipeline("test", [Skippable("optional"), Final("final")]).execute(
            PricingContext()
        )

        assert ran == ["optional", "final"]
        assert context.success

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        """Test exceptions other than pricing errors are not swallowed."""

        class Broken(PipelineStep):
            async def execute(self, context):
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await Pipeline("test", [Broken()]).execute(PricingContext())

    def test_sync_execution(self):
        """Test plain steps run without an event loop."""

        class Plain(PipelineStep):
            def execute(self, context):
                context.markup_percent = Decimal("5")
                return True

        context = Pipeline("test", [Plain("plain")]).execute_sync(PricingContext())

        assert context.success
        assert context.markup_percent == Decimal("5")
        assert list(context.step_timings) == ["plain"]

    def test_sync_execution_rejects_coroutine_steps(self):
        """Test a coroutine step cannot be run by the synchronous executor."""

        class Awaiting(PipelineStep):
            async def execute(self, context):
                return True

        with pytest.raises(TypeError, match="asynchronous"):
            Pipeline("test", [Awaiting("awaiting")]).execute_sync(PricingContext())

    def test_context_stats(self):
        """Test stats report the computation id and counts."""
        context = PricingContext(computation_id="abc123")

        stats = context.get_stats()

        assert stats["computation_id"] == "abc123"
        assert stats["line_items"] == 0
        assert stats["errors"] == []
        assert stats["steps"] == []


class TestRateRowValidation:
    """Tests for rate rows handed over by the rate collaborator."""

    def test_inverted_window_rejected(self):
        """Test a rate row whose window ends before it starts is refused."""
        with pytest.raises(ValueError):
            RateLookupRow(price="10", vehicleTypeId="Bus", validFrom="2025-02-01", validTo="2025-01-01")
