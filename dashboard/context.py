from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    user_id: str
    email: str
    access_token: str = ""

    @classmethod
    def from_payload(cls, payload, access_token=""):
        return cls(
            user_id=str(payload["user_id"]),
            email=str(payload.get("email") or ""),
            access_token=access_token,
        )
