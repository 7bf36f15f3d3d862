"""Top users of a location, ranked by public contributions."""

from pydantic import BaseModel, Field

from github_credit.models.github import UserContributions


class RankedUser(BaseModel):
    """A user and their contributions."""

    login: str
    name: str | None = None
    public_contributions: int = 0

    @classmethod
    def from_contributions(cls, user: UserContributions) -> "RankedUser":
        return cls(
            login=user.login,
            name=user.name,
            public_contributions=user.contributions,
        )


class UserRanking(BaseModel):
    """The most active users in a location."""

    total_users: int = 0
    contributions: list[RankedUser] = Field(default_factory=list)

    @classmethod
    def from_search(
        cls,
        total_users: int,
        users: list[UserContributions],
        top: int = 100,
    ) -> "UserRanking":
        """Rank searched users by contributions, weighted by followers.

        The 500 most active users are narrowed to the 250 most followed,
        and of those the ``top`` most active are kept.
        """
        by_contribs = sorted(users, key=lambda u: u.contributions, reverse=True)[:500]
        by_followers = sorted(by_contribs, key=lambda u: u.followers, reverse=True)[:250]
        ranked = sorted(by_followers, key=lambda u: u.contributions, reverse=True)[:top]

        return cls(
            total_users=total_users,
            contributions=[RankedUser.from_contributions(u) for u in ranked],
        )
