from thanos_finance.core.achievements import STONES, derive_flags, diff_for_xp, evaluate, get_stone
from thanos_finance.core.models import (
    AchievementFlags, ChatMessage, Collections, Habit, Investment
)

from conftest import expense, income


def habits(total: int, completed: int):
    return [
        Habit(id=f"h{i}", name=f"Hábito {i}", completed=i < completed)
        for i in range(total)
    ]


class TestDeriveFlags:
    def test_empty_collections(self):
        assert derive_flags(Collections()) == AchievementFlags()

    def test_no_habits_means_no_space(self):
        flags = derive_flags(Collections(transactions=[income(100)]))
        assert flags.space is False

    def test_income_above_expenses(self):
        flags = derive_flags(Collections(transactions=[income(1200), expense(1000)]))
        assert flags.power is True
        assert flags.mind is True

    def test_expenses_above_income(self):
        flags = derive_flags(Collections(transactions=[income(500), expense(800)]))
        assert flags.power is False
        assert flags.mind is False

    def test_balanced_books_are_not_positive(self):
        flags = derive_flags(Collections(transactions=[income(500), expense(500)]))
        assert flags.power is False
        assert flags.mind is False

    def test_two_of_three_habits_completed(self):
        flags = derive_flags(Collections(habits=habits(3, 2)))
        assert flags.space is True
        assert flags.soul is True

    def test_one_of_three_habits_completed(self):
        flags = derive_flags(Collections(habits=habits(3, 1)))
        assert flags.space is False
        assert flags.soul is True

    def test_investment_and_user_message(self):
        flags = derive_flags(Collections(
            investments=[Investment(id="i1", name="Tesouro", amount=100, category="Renda Fixa")],
            chat_messages=[ChatMessage(id="m1", role="user", text="Olá")]
        ))
        assert flags.reality is True
        assert flags.time is True

    def test_assistant_message_alone_does_not_count(self):
        flags = derive_flags(Collections(
            chat_messages=[ChatMessage(id="m1", role="assistant", text="Bem-vindo")]
        ))
        assert flags.time is False


class TestDiffForXp:
    def test_sums_new_stones(self):
        old = AchievementFlags()
        new = AchievementFlags(power=True, reality=True, mind=True)
        assert diff_for_xp(old, new) == 1500

    def test_lost_stone_costs_nothing(self):
        old = AchievementFlags(power=True, soul=True)
        new = AchievementFlags(soul=True)
        assert diff_for_xp(old, new) == 0

    def test_mind_has_no_bonus(self):
        assert diff_for_xp(AchievementFlags(), AchievementFlags(mind=True)) == 0


class TestEvaluate:
    def test_idempotent(self):
        collections = Collections(transactions=[income(1200), expense(1000)], habits=habits(3, 2))
        first = evaluate(collections, AchievementFlags())
        second = evaluate(collections, first.flags)

        assert first.xp_delta == 500 + 200 + 300
        assert second.flags == first.flags
        assert second.xp_delta == 0
        assert not second.changed

    def test_reports_unlocked_and_lost(self):
        result = evaluate(Collections(habits=habits(3, 0)), AchievementFlags(power=True))
        assert result.unlocked == ["soul"]
        assert result.lost == ["power"]


def test_registry_order_and_rewards():
    assert [s.stone_id for s in STONES] == ["power", "space", "reality", "soul", "time", "mind"]
    assert get_stone("reality").xp_reward == 1000
    assert get_stone("time").xp_reward == 100
    assert get_stone("unknown") is None


def test_gauntlet_complete():
    flags = AchievementFlags(**{name: True for name in AchievementFlags.FIELDS})
    assert flags.all_collected
    assert flags.collected_count == 6
