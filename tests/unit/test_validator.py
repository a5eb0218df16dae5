from __future__ import annotations

from equipment_import.config.loader import default_config
from equipment_import.models.equipment import CpuField, MonitorField
from equipment_import.services.record_builder import RowContext, build_cpu, build_monitor
from equipment_import.services.validator import has_minimal_cpu_data, has_minimal_monitor_data

CFG = default_config()
CTX = RowContext(sheet_name="S", position=1, department="GTI")


def test_cpu_with_only_item_is_rejected():
    cpu = build_cpu({CpuField.ITEM: 1}, CTX, CFG)
    assert not has_minimal_cpu_data(cpu)


def test_cpu_defaults_do_not_count_as_data():
    # status / on_domain / department are always filled
    cpu = build_cpu({CpuField.STATUS: "Ativo", CpuField.RAM_SIZE: "8GB"}, CTX, CFG)
    assert not has_minimal_cpu_data(cpu)


def test_cpu_with_any_substantive_field_is_kept():
    for field in (CpuField.NOMENCLATURE, CpuField.BRAND_MODEL, CpuField.PROCESSOR,
                  CpuField.ASSET_TAG, CpuField.OWNER):
        assert has_minimal_cpu_data(build_cpu({field: "x"}, CTX, CFG))


def test_monitor_rule():
    assert not has_minimal_monitor_data(build_monitor({MonitorField.SERIAL_NUMBER: "SN"}, CTX, CFG))
    assert has_minimal_monitor_data(build_monitor({MonitorField.MODEL: "Dell"}, CTX, CFG))
    assert has_minimal_monitor_data(build_monitor({MonitorField.ASSET_TAG: 22001}, CTX, CFG))
