from decimal import Decimal

from ..schemas.donation import DonationReserveRequest


class TestStatsService:
    """统计测试"""

    def test_empty_database(self, stats):
        campus = stats.get_campus_stats()

        assert campus.total_meals_saved == 0
        assert campus.active_students == 0
        assert campus.partner_canteens == 0
        assert campus.total_savings == Decimal("0")

    def test_savings_multiply_by_quantity(self, stats, claims, make_item, student_user, other_student):
        item = make_item(quantity=5, original="10.00", discounted="6.50")
        two = claims.reserve(student_user.id, item.id, quantity=2)
        one = claims.reserve(other_student.id, item.id)
        claims.complete(two.id)
        claims.complete(one.id)

        campus = stats.get_campus_stats()

        assert campus.total_meals_saved == 2
        assert campus.total_savings == Decimal("10.50")
        assert campus.active_students == 2

    def test_savings_serialized_as_number(self, stats, claims, make_item, student_user):
        item = make_item(quantity=2, original="9.99", discounted="4.49")
        claims.complete(claims.reserve(student_user.id, item.id, quantity=2).id)

        campus = stats.get_campus_stats()

        assert isinstance(campus.total_savings, Decimal)
        assert campus.model_dump(mode="json")["total_savings"] == 11.0
        assert stats.get_staff_stats(item.created_by).model_dump(mode="json")["total_savings"] == 11.0

    def test_only_claimed_counted_as_saved(self, stats, claims, make_item, student_user):
        item = make_item(quantity=3)
        claims.reserve(student_user.id, item.id)
        cancelled = claims.reserve(student_user.id, item.id)
        claims.cancel(cancelled.id, student_user.id)

        campus = stats.get_campus_stats()

        assert campus.total_meals_saved == 0
        assert campus.total_savings == Decimal("0")
        assert campus.active_students == 1

    def test_active_students_window(self, stats, claims, make_item, student_user, clock):
        item = make_item(hours=2)
        claims.reserve(student_user.id, item.id)
        clock.advance(days=31)

        assert stats.get_campus_stats().active_students == 0

    def test_partner_canteens_distinct(self, stats, make_item):
        make_item(canteen="North Canteen")
        make_item(canteen="North Canteen")
        make_item(canteen="South Canteen")

        assert stats.get_campus_stats().partner_canteens == 2

    def test_staff_stats(self, stats, claims, donations, make_item, other_staff,
                         staff_user, student_user, clock):
        reserved_item = make_item(quantity=2, hours=5)
        claims.reserve(student_user.id, reserved_item.id)
        expiring = make_item(quantity=4, hours=1)
        make_item(quantity=3, hours=1, staff=other_staff)
        clock.advance(hours=2)
        donations.transfer_expired()
        mine = donations.list_by_creator(staff_user.id)[0]
        donations.reserve_for_ngo(mine.id, DonationReserveRequest(
            ngo_name="Shelter", ngo_contact_person="Eve", ngo_phone_number="123"
        ))

        staff = stats.get_staff_stats(staff_user.id)

        assert staff.items_listed == 2
        assert staff.active_items == 1
        assert staff.reserved_claims == 1
        assert staff.donations_available == 0
        assert staff.donations_reserved == 1
        assert staff.donations_collected == 0
        assert staff.partner_canteens == 1
        assert mine.food_item_id == expiring.id
