"""Healthcare records workflow.

This module groups prescriptions by patient and answers per-patient
prescription queries from the derived index.
"""

from __future__ import annotations

from core.types import Patient, Prescription
from store.entity_store import EntityStore
from store.group_index import GroupIndex, build_index


def prescriptions_by_patient(
    prescriptions: EntityStore[int, Prescription],
) -> GroupIndex[int, Prescription]:
    """Index prescriptions by ``patient_id`` in store order."""
    return build_index(prescriptions, lambda prescription: prescription.patient_id)


def patient_prescriptions(
    patients: EntityStore[int, Patient],
    index: GroupIndex[int, Prescription],
    patient_id: int,
) -> tuple[Patient, tuple[Prescription, ...]]:
    """Return a patient and their prescriptions.

    Args:
        patients: Patient store.
        index: Prescription index built by ``prescriptions_by_patient``.
        patient_id: Patient to look up.

    Returns:
        The patient and their prescriptions; the tuple is empty for
        patients without prescriptions.

    Raises:
        NotFoundError: If the patient does not exist.
    """
    patient = patients.get_by_id(patient_id)
    return patient, index.lookup_group(patient_id)
