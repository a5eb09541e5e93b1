"""
Tests for the CSV export.
"""

import csv
import io
from datetime import date

from corpreg.services import export_service


def parse(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class TestBuildCsv:

    def test_header_only_for_empty_store(self, store):
        assert export_service.build_csv(store.export_snapshot()) == (
            "법인명,법인등록번호,사업연도,시작일,종료일,사업연도여부,비고\n"
        )

    def test_company_with_fiscal_years(self, store, test_company_with_fiscal_year, factory):
        company, _ = test_company_with_fiscal_year
        factory.create_fiscal_year(company, year="2023", remarks="비고, 쉼표 포함")

        rows = parse(export_service.build_csv(store.export_snapshot()))

        assert rows[0] == export_service.HEADER
        assert rows[1] == ["테스트 주식회사", "110-81-12345", "2022", "20220101", "20221231", "Y", ""]
        assert rows[2] == ["테스트 주식회사", "110-81-12345", "2023", "20230101", "20231231", "N", "비고, 쉼표 포함"]

    def test_company_without_fiscal_years(self, store, test_company):
        rows = parse(export_service.build_csv(store.export_snapshot()))
        assert rows[1] == ["테스트 주식회사", "110-81-12345", "", "", "", "", ""]

    def test_values_are_quoted(self, store, test_company):
        text = export_service.build_csv(store.export_snapshot())
        assert text.splitlines()[1].startswith('"테스트 주식회사","110-81-12345"')


class TestExportBytes:

    def test_utf8_bom(self, store, test_company):
        data = export_service.export_bytes(store.export_snapshot())
        assert data.startswith(b"\xef\xbb\xbf")
        assert data[3:].decode("utf-8").startswith("법인명,")


class TestExportFilename:

    def test_filename(self):
        assert export_service.export_filename(date(2024, 3, 5)) == "법인정보_20240305.csv"
