import unittest
from unittest.mock import MagicMock

from requests import Timeout

from firebasemanager.services.auth_service import AuthServiceError, FirebaseAuthService

from tests.helpers import make_response


class FirebaseAuthServiceTests(unittest.TestCase):
    def setUp(self):
        self.http = MagicMock()
        self.auth = FirebaseAuthService("api-key", "https://auth.example/v1/", http=self.http)

    def test_sign_in_stores_current_user(self):
        self.http.post.return_value = make_response(
            200,
            {"localId": "uid-1", "email": "ada@example.com", "idToken": "tok", "refreshToken": "ref"},
        )
        result = self.auth.sign_in("ada@example.com", "secret")

        self.assertEqual(result.uid, "uid-1")
        self.assertEqual(self.auth.id_token, "tok")
        args, kwargs = self.http.post.call_args
        self.assertEqual(args[0], "https://auth.example/v1/accounts:signInWithPassword")
        self.assertEqual(kwargs["params"], {"key": "api-key"})
        self.assertTrue(kwargs["json"]["returnSecureToken"])

    def test_rejected_credentials(self):
        self.http.post.return_value = make_response(400, {"error": {"code": 400, "message": "INVALID_PASSWORD"}})
        with self.assertRaises(AuthServiceError) as ctx:
            self.auth.sign_in("ada@example.com", "wrong")
        self.assertEqual(str(ctx.exception), "INVALID_PASSWORD")
        self.assertIsNone(self.auth.current_user)

    def test_unavailable(self):
        self.http.post.side_effect = Timeout()
        with self.assertRaises(AuthServiceError) as ctx:
            self.auth.sign_in("ada@example.com", "secret")
        self.assertEqual(str(ctx.exception), "AUTH_SERVICE_UNAVAILABLE")

    def test_sign_out(self):
        self.http.post.return_value = make_response(200, {"localId": "uid-1", "idToken": "tok"})
        self.auth.sign_in("ada@example.com", "secret")
        self.auth.sign_out()
        self.assertIsNone(self.auth.id_token)


if __name__ == "__main__":
    unittest.main()
