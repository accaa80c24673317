import pytest

from ..core.exceptions import DonationNotFoundError, DonationWrongStateError, ValidationError
from ..models.donation import DonationStatus
from ..schemas.donation import DonationReserveRequest

NGO = dict(ngo_name="Food Bank", ngo_contact_person="Bob", ngo_phone_number="555-0100")


@pytest.fixture
def expired_items(make_item, clock):
    """三个已过截止时间且有剩余的餐品"""
    items = [make_item(quantity=q, hours=1, name=f"Item {q}") for q in (1, 2, 3)]
    clock.advance(hours=2)
    return items


class TestTransferExpired:
    """过期餐品转入捐赠测试"""

    def test_transfer_is_idempotent(self, donations, expired_items):
        assert donations.transfer_expired() == 3
        assert donations.transfer_expired() == 0

        all_donations = donations.list_all()
        assert len(all_donations) == 3
        assert sorted(d.food_item_id for d in all_donations) == sorted(i.id for i in expired_items)
        assert all(d.status == DonationStatus.AVAILABLE.value for d in all_donations)
        assert sorted(d.quantity_donated for d in all_donations) == [1, 2, 3]

    def test_skips_sold_out_and_current_items(self, donations, claims, make_item, student_user, clock):
        sold_out = make_item(quantity=1, hours=1)
        claims.reserve(student_user.id, sold_out.id)
        make_item(quantity=4, hours=5)
        leftover = make_item(quantity=2, hours=1)
        clock.advance(hours=2)

        assert donations.transfer_expired() == 1
        assert [d.food_item_id for d in donations.list_all()] == [leftover.id]

    def test_list_by_creator(self, donations, make_item, other_staff, clock):
        mine = make_item(hours=1)
        make_item(hours=1, staff=other_staff)
        clock.advance(hours=2)
        donations.transfer_expired()

        listed = donations.list_by_creator(mine.created_by)

        assert [d.food_item_id for d in listed] == [mine.id]
        assert listed[0].food_item.name == mine.name


class TestDonationLifecycle:
    """捐赠状态流转测试"""

    def test_reserve_then_collect(self, donations, expired_items, staff_user):
        donations.transfer_expired()
        donation = donations.list_all()[0]

        reserved = donations.reserve_for_ngo(donation.id, DonationReserveRequest(**NGO),
                                             actor_id=staff_user.id)
        assert reserved.status == DonationStatus.RESERVED_FOR_NGO.value
        assert reserved.ngo_name == "Food Bank"
        assert reserved.reserved_at is not None

        collected = donations.mark_collected(donation.id, actor_id=staff_user.id)
        assert collected.status == DonationStatus.COLLECTED.value
        assert collected.collected_at is not None

    def test_empty_phone_rejected(self, donations, expired_items):
        donations.transfer_expired()
        donation = donations.list_all()[0]

        with pytest.raises(ValidationError) as exc_info:
            donations.reserve_for_ngo(donation.id, DonationReserveRequest(**{**NGO, "ngo_phone_number": ""}))

        assert exc_info.value.details["missing_fields"] == ["ngo_phone_number"]
        assert donations.get_by_id(donation.id).status == DonationStatus.AVAILABLE.value

    def test_collect_requires_reservation(self, donations, expired_items):
        donations.transfer_expired()
        donation = donations.list_all()[0]

        with pytest.raises(DonationWrongStateError):
            donations.mark_collected(donation.id)
        assert donations.get_by_id(donation.id).status == DonationStatus.AVAILABLE.value

    def test_reserve_twice_fails(self, donations, expired_items):
        donations.transfer_expired()
        donation = donations.list_all()[0]
        donations.reserve_for_ngo(donation.id, DonationReserveRequest(**NGO))

        with pytest.raises(DonationWrongStateError):
            donations.reserve_for_ngo(donation.id, DonationReserveRequest(**NGO))

    def test_missing_donation(self, donations):
        with pytest.raises(DonationNotFoundError):
            donations.mark_collected(404)
