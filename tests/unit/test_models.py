"""
Request/response model behaviour and normalization helpers.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from core.domain.models import Anagrafica, Ingresso, Posto, Settore, StatoSlot, SystemStatus, as_list, to_epoch_millis


class TestAnagrafica:
    def test_required_fields(self):
        with pytest.raises(ValidationError):
            Anagrafica(cognome="Rossi", nome="Mario")

    def test_defaults(self):
        anagrafica = Anagrafica(cognome="Rossi", nome="Mario", email="m@example.com")
        dumped = anagrafica.model_dump(mode="json")

        assert dumped["marketing"] is False
        assert dumped["telefono"] is None
        assert set(dumped) >= {"riferi1", "riferi2", "riferi3", "luogonascita", "datanascita", "cap", "citta"}


class TestIngresso:
    def test_defaults(self):
        ingresso = Ingresso(settore=1, prezzo=4)
        assert ingresso.qta == 1
        assert ingresso.posti == []
        assert ingresso.abbonamento is None

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            Ingresso(settore=1, prezzo=4, qta=0)


class TestAsList:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, []),
            ([], []),
            (101, [101]),
            ("101", ["101"]),
            ([1, 2], [1, 2]),
            ((1, 2), [1, 2]),
        ],
    )
    def test_normalization(self, value, expected):
        assert as_list(value) == expected

    def test_model_is_a_single_item(self):
        ingresso = Ingresso(settore=1)
        assert as_list(ingresso) == [ingresso]

    def test_mapping_is_a_single_item(self):
        assert as_list({"tipoabbonamento": 3}) == [{"tipoabbonamento": 3}]

    def test_generator_is_expanded(self):
        assert as_list(i for i in (1, 2)) == [1, 2]


class TestEpochMillis:
    def test_int_passthrough(self):
        assert to_epoch_millis(1700000000000) == 1700000000000

    def test_aware_datetime(self):
        assert to_epoch_millis(datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)) == 1700000000000

    def test_naive_datetime_is_utc(self):
        assert to_epoch_millis(datetime(2023, 11, 14, 22, 13, 20)) == 1700000000000


class TestSystemStatus:
    def test_version_parts_missing(self):
        status = SystemStatus(ready=True, versione="2.1.0")
        assert status.versione_fiscale == "2.1.0"
        assert status.versione_db is None
        assert status.build is None


class TestNullFields:
    def test_null_collections_become_empty(self):
        settore = Settore.model_validate({"id": 1, "settore": "Platea", "prezzi": None})
        assert settore.nome == "Platea"
        assert settore.prezzi == []

    def test_null_scalars_take_defaults(self):
        assert Posto.model_validate({"id": 3, "classe": None}).classe == 0
        assert StatoSlot.model_validate({"limiteremoto": None}).limiteremoto is False

    def test_null_keeps_optional_fields_empty(self):
        assert Posto.model_validate({"id": 3, "nome": None}).nome is None

    def test_required_field_still_rejects_null(self):
        with pytest.raises(ValidationError):
            Posto.model_validate({"id": None})
