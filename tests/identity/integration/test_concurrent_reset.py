"""Two requests racing to consume the same reset token."""

import threading

from identity.domain import identity
from identity.user.password_reset import PASSWORD_RESET_MESSAGE, request_password_reset, reset_password
from identity.user.passwords import verify_password
from shared.errors import InvalidToken


class TestConcurrentReset:
    def test_token_is_consumed_exactly_once(self, user_store, mailer, user):
        request_password_reset(user_store, mailer, "wes@example.com")
        token = user_store.get(user.id).reset_token

        passwords = ["first-passw0rd", "second-passw0rd", "third-passw0rd"]
        barrier = threading.Barrier(len(passwords))
        results, errors = [], []
        lock = threading.Lock()

        def attempt(password):
            with identity.domain_context():
                barrier.wait()
                try:
                    response = reset_password(user_store, token, password, password)
                except InvalidToken as exc:
                    with lock:
                        errors.append(exc)
                else:
                    with lock:
                        results.append((password, response))

        threads = [threading.Thread(target=attempt, args=(p,)) for p in passwords]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert len(results) == 1
        assert len(errors) == len(passwords) - 1
        winner, response = results[0]
        assert response == {"message": PASSWORD_RESET_MESSAGE}
        assert verify_password(winner, user_store.get(user.id).password_hash)
        assert user_store.get(user.id).reset_token is None
