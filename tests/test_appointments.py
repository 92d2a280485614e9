# -*- coding: utf-8 -*-

from __future__ import annotations

import unittest

from apptest import AppTestCase


class TestAppointments(AppTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.doctor = self.register("dr.who@example.com", userType="doctor", lastName="Who")
        self.doctor_id = self.last_user["id"]
        self.patient = self.register("patient@example.com")
        self.patient_id = self.last_user["id"]

    def _book(self, **fields) -> dict:
        payload = {"doctorId": self.doctor_id, "appointmentDate": "2024-05-01T09:00:00Z", **fields}
        resp = self.client.post("/api/appointments", json=payload, headers=self.patient)
        self.assertEqual(resp.status_code, 200, resp.text)
        return resp.json()

    def test_book_and_list(self) -> None:
        first = self._book()
        self.assertEqual(first["patientId"], self.patient_id)
        self.assertEqual(first["status"], "scheduled")
        self.assertEqual(first["duration"], 30)
        self.assertFalse(first["isPaid"])
        self._book(appointmentDate="2024-06-01T09:00:00Z", type="video", price=80, isPaid=True)

        resp = self.client.get("/api/appointments", headers=self.patient)
        self.assertEqual(resp.status_code, 200)
        listed = resp.json()
        self.assertEqual([a["appointmentDate"] for a in listed], ["2024-06-01T09:00:00.000Z", "2024-05-01T09:00:00.000Z"])
        self.assertTrue(listed[0]["isPaid"])

        # Listing is by patient; the doctor sees none of their own bookings here.
        resp = self.client.get("/api/appointments", headers=self.doctor)
        self.assertEqual(resp.json(), [])

    def test_status_update(self) -> None:
        appt = self._book()
        resp = self.client.patch(f"/api/appointments/{appt['id']}/status", json={"status": "cancelled"}, headers=self.patient)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"message": "Appointment status updated"})

        listed = self.client.get("/api/appointments", headers=self.patient).json()
        self.assertEqual(listed[0]["status"], "cancelled")

        resp = self.client.patch(f"/api/appointments/{appt['id']}/status", json={"status": "completed"}, headers=self.doctor)
        self.assertEqual(resp.status_code, 200)

    def test_invalid_status_is_400(self) -> None:
        appt = self._book()
        resp = self.client.patch(f"/api/appointments/{appt['id']}/status", json={"status": "lost"}, headers=self.patient)
        self.assertEqual(resp.status_code, 400)
        self.assertIn("status", resp.json()["message"])

    def test_unknown_or_foreign_appointment_is_404(self) -> None:
        appt = self._book()
        resp = self.client.patch("/api/appointments/9999/status", json={"status": "completed"}, headers=self.patient)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json(), {"message": "Appointment not found"})

        resp = self.client.patch(f"/api/appointments/{10**20}/status", json={"status": "completed"}, headers=self.patient)
        self.assertEqual(resp.status_code, 400)

        stranger = self.register("stranger@example.com")
        resp = self.client.patch(f"/api/appointments/{appt['id']}/status", json={"status": "completed"}, headers=stranger)
        self.assertEqual(resp.status_code, 404)

        listed = self.client.get("/api/appointments", headers=self.patient).json()
        self.assertEqual(listed[0]["status"], "scheduled")

    def test_unknown_doctor_is_500(self) -> None:
        resp = self.client.post(
            "/api/appointments",
            json={"doctorId": "no-such-doctor", "appointmentDate": "2024-05-01T09:00:00Z"},
            headers=self.patient,
        )
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {"message": "Failed to create appointment"})


if __name__ == "__main__":
    unittest.main()
