import hashlib
import logging
import secrets
import threading
from pathlib import Path

import yaml

from src.domain.access import ANONYMOUS_GROUPS, PermissionLevel
from src.domain.identifiers import acl_scopes

logger = logging.getLogger(__name__)

_CAPABILITIES = frozenset({"addUser", "delUser"})

PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: str | None = None) -> str:
    """'<salt>$<pbkdf2_hmac(sha256, password, salt)>' 형식"""
    salt = salt or secrets.token_hex(8)
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), PBKDF2_ITERATIONS,
    ).hex()
    return f"{salt}${digest}"


def verify_password(password: str, stored: str) -> bool:
    salt, sep, _ = stored.partition("$")
    if not sep:
        return False
    return secrets.compare_digest(hash_password(password, salt), stored)


class YamlAuthBackend:
    """
    YAML 파일 기반 사용자/ACL 백엔드 (mtime 캐시).

    파일 구조:
        default_groups: [user]
        users:
          <login>: {password_hash, name, mail, groups}
        acl:
          - {scope: "<id | ns:* | *>", subject: "<user | @group>", level: <int>}
    """

    name = "yaml"

    def __init__(
        self,
        yaml_path: str | Path,
        superuser: str = "@admin",
        use_acl: bool = True,
    ):
        self._path = Path(yaml_path)
        self._superusers = [s.strip() for s in superuser.split(",") if s.strip()]
        self._use_acl = use_acl
        self._cache: dict | None = None
        self._cache_mtime: float = 0.0
        self._lock = threading.Lock()

    def _ensure_loaded(self) -> dict:
        """파일이 변경되었으면 다시 로드합니다. 파일이 없으면 빈 설정"""
        try:
            current_mtime = self._path.stat().st_mtime
        except FileNotFoundError:
            if self._cache is None:
                logger.warning("사용자 YAML 파일 없음: %s", self._path)
                self._cache = {}
            return self._cache

        if self._cache is None or current_mtime > self._cache_mtime:
            logger.info("사용자 YAML 로드: %s", self._path)
            with open(self._path, "r", encoding="utf-8") as f:
                self._cache = yaml.safe_load(f) or {}
            self._cache_mtime = current_mtime
            logger.info(
                "사용자 YAML 로드 완료: 사용자 %d명, ACL 규칙 %d개",
                len(self._cache.get("users") or {}),
                len(self._cache.get("acl") or []),
            )
        return self._cache

    def _save(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
        self._cache = data
        self._cache_mtime = self._path.stat().st_mtime

    def _users(self) -> dict:
        return self._ensure_loaded().get("users") or {}

    def is_administrator(self, user: str, groups: tuple[str, ...]) -> bool:
        if not user:
            return False
        for member in self._superusers:
            if member.startswith("@"):
                if member[1:] in groups:
                    return True
            elif member == user:
                return True
        return False

    def permission_level(self, identifier: str, user: str, groups: tuple[str, ...]) -> PermissionLevel:
        """
        가장 구체적인 범위부터 '*' 까지 규칙을 찾아, 처음 일치한 범위의 최대 권한을 반환합니다.
        ACL 규칙으로는 DELETE 를 넘는 권한을 줄 수 없습니다.
        """
        if not self._use_acl:
            return PermissionLevel.DELETE
        groups = tuple(dict.fromkeys((*ANONYMOUS_GROUPS, *groups)))
        if self.is_administrator(user, groups):
            return PermissionLevel.ADMIN

        subjects = {f"@{group}" for group in groups}
        if user:
            subjects.add(user)

        rules = self._ensure_loaded().get("acl") or []
        for scope in acl_scopes(identifier):
            levels = [
                int(rule.get("level", 0)) for rule in rules
                if rule.get("scope") == scope and rule.get("subject") in subjects
            ]
            if levels:
                best = min(max(levels), int(PermissionLevel.DELETE))
                return max(
                    (level for level in PermissionLevel if level <= best),
                    default=PermissionLevel.NONE,
                )
        return PermissionLevel.NONE

    def supports(self, capability: str) -> bool:
        return capability in _CAPABILITIES

    def clean_user(self, user: str) -> str:
        return "".join(ch for ch in (user or "").strip().lower() if ch.isalnum() or ch in "._-@")

    def check_credentials(self, user: str, password: str) -> bool:
        record = self._users().get(self.clean_user(user))
        if not record or not password:
            return False
        return verify_password(password, str(record.get("password_hash", "")))

    def create_user(
        self,
        user: str,
        password: str,
        name: str,
        mail: str,
        groups: list[str] | None,
    ) -> bool:
        with self._lock:
            data = dict(self._ensure_loaded())
            users = dict(data.get("users") or {})
            if user in users:
                logger.info("이미 존재하는 사용자: %s", user)
                return False
            if groups is None:
                groups = list(data.get("default_groups") or ["user"])
            users[user] = {
                "password_hash": hash_password(password),
                "name": name,
                "mail": mail,
                "groups": list(groups),
            }
            data["users"] = users
            self._save(data)
        logger.info("사용자 추가: %s", user)
        return True

    def delete_users(self, names: list[str]) -> bool:
        with self._lock:
            data = dict(self._ensure_loaded())
            users = dict(data.get("users") or {})
            removed = [name for name in names if users.pop(name, None) is not None]
            if not removed:
                return False
            data["users"] = users
            self._save(data)
        logger.info("사용자 삭제: %s", removed)
        return True

    def user_groups(self, user: str) -> list[str] | None:
        record = self._users().get(user)
        if record is None:
            return None
        return list(record.get("groups") or [])
