from django.test import TestCase


class HealthCheckTests(TestCase):
    def test_reports_database_reachable(self):
        response = self.client.get("/health/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertTrue(body["db"])
