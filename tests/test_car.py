#!/usr/bin/env python3
"""Tests for Car class."""

from availability import Car


class TestCar:
    """Tests for Car class."""

    def test_name_without_trim(self):
        car = Car("car-1", "Toyota", "Corolla", 2022, "EK-001")
        assert car.name == "2022 Toyota Corolla"

    def test_name_with_trim(self):
        car = Car("car-2", "Mercedes-Benz", "C-Class", 2021, "EK-002", trim="C300")
        assert car.name == "2021 Mercedes-Benz C-Class C300"

    def test_label_includes_car_number(self):
        car = Car("car-1", "Toyota", "Corolla", 2022, "EK-001")
        assert car.label == "EK-001 - 2022 Toyota Corolla"
