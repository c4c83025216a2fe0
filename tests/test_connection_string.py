"""
Tests for connection string parsing and dialect serialization.
"""

import pytest

from dataaudit.infrastructure.connection_string import (
    HIVE,
    KNOWN_PROVIDERS,
    MYSQL,
    POSTGRESQL,
    SQL_SERVER,
    SQLITE,
    ConnectionDescriptor,
)


class TestParsing:
    """Key recognition and extras handling."""

    def test_sql_server_keys(self):
        """Test the SQL Server key names."""
        d = ConnectionDescriptor(
            "Data Source=sql01;Initial Catalog=crm;User ID=auditor;Password=secret;", SQL_SERVER
        )

        assert d.server == "sql01"
        assert d.database == "crm"
        assert d.user == "auditor"
        assert d.password == "secret"
        assert d.port == ""
        assert d.extra_settings == ""

    def test_aliases_are_case_insensitive(self):
        """Test that aliases match regardless of case and padding."""
        d = ConnectionDescriptor("SERVER=db1; DATABASE =shop;uid=u;PWD=p;Port=3306", MYSQL)

        assert d.server == "db1"
        assert d.database == "shop"
        assert d.user == "u"
        assert d.password == "p"
        assert d.port == "3306"

    def test_hive_keys(self):
        """Test Host/Schema/DefaultTable/Driver keys."""
        d = ConnectionDescriptor(
            "DRIVER=Cloudera ODBC Driver for Apache Hive;Host=hive01;Port=10000;Schema=default;DefaultTable=events",
            HIVE,
        )

        assert d.driver == "Cloudera ODBC Driver for Apache Hive"
        assert d.server == "hive01"
        assert d.port == "10000"
        assert d.database == "default"
        assert d.target_table == "events"
        assert d.is_dsn_only is False

    def test_unknown_keys_kept_in_order(self):
        """Test that unrecognized pairs are preserved verbatim."""
        d = ConnectionDescriptor("Server=a;Encrypt=yes;TrustServerCertificate=no;", SQL_SERVER)

        assert d.extra_settings == "Encrypt=yes;TrustServerCertificate=no;"
        assert d.extra_pairs == [("Encrypt", "yes"), ("TrustServerCertificate", "no")]

    def test_value_keeps_equals_signs(self):
        """Test that only the first '=' separates key and value."""
        d = ConnectionDescriptor("Server=a;Password=ab=cd==", SQL_SERVER)
        assert d.password == "ab=cd=="

    def test_malformed_fragments_are_absorbed(self):
        """Test empty fragments and fragments without '='."""
        d = ConnectionDescriptor(";;Server=x;;Trusted;", SQL_SERVER)

        assert d.server == "x"
        assert d.extra_settings == "Trusted=;"

    def test_empty_string(self):
        """Test that an empty string yields empty fields."""
        d = ConnectionDescriptor("", SQL_SERVER)

        assert all(value == "" for value in d.as_dict().values())
        assert d.is_dsn_only is False

    def test_provider_id_is_normalized(self):
        """Test provider identifiers are compared in lower case."""
        assert ConnectionDescriptor("", " System.Data.SQLite ").provider_id == SQLITE

    def test_timeouts_are_settable(self):
        """Test that only the timeouts are writable."""
        d = ConnectionDescriptor("Server=x", SQL_SERVER)
        assert d.connection_timeout is None
        assert d.command_timeout is None

        d.connection_timeout = 15
        d.command_timeout = 180
        assert (d.connection_timeout, d.command_timeout) == (15, 180)

        with pytest.raises(AttributeError):
            d.server = "other"

    def test_descriptor_is_unhashable(self):
        """Test that descriptors compare by value and are not hashable."""
        d = ConnectionDescriptor("Server=x", SQL_SERVER)
        with pytest.raises(TypeError):
            hash(d)


class TestDialects:
    """Serialization into each provider's dialect."""

    def test_sql_server(self):
        d = ConnectionDescriptor("Server=sql01;Database=crm;Uid=auditor;Pwd=secret", SQL_SERVER)
        assert d.to_string() == "Data Source=sql01;Initial Catalog=crm;User ID=auditor;Password=secret;"

    def test_mysql(self):
        d = ConnectionDescriptor("Data Source=db1;Initial Catalog=shop;User ID=u;Password=p", MYSQL)
        assert d.to_string() == "Server=db1;Database=shop;Uid=u;Pwd=p"

    def test_mysql_keeps_port(self):
        d = ConnectionDescriptor("Server=db1;Database=shop;Uid=u;Pwd=p;Port=3306", MYSQL)
        assert d.to_string() == "Server=db1;Database=shop;Uid=u;Pwd=p;Port=3306"

    def test_postgresql_with_extras(self):
        d = ConnectionDescriptor("Host=pg1;Database=sales;User ID=u;Password=p;sslmode=require", POSTGRESQL)
        assert d.to_string() == "Server=pg1;Database=sales;User ID=u;Password=p;sslmode=require;"

    def test_sqlite(self):
        d = ConnectionDescriptor("Data Source=/data/audit.db", SQLITE)
        assert d.to_string() == "Data Source=/data/audit.db"

    def test_sqlite_extras_are_separated(self):
        d = ConnectionDescriptor("Data Source=/data/audit.db;Version=3", SQLITE)
        assert d.to_string() == "Data Source=/data/audit.db;Version=3;"

    def test_hive(self):
        d = ConnectionDescriptor(
            "DRIVER=Hive;Host=h;Port=10000;Schema=default;DefaultTable=events;UID=u;PWD=p", HIVE
        )
        assert d.to_string() == "DRIVER=Hive;Host=h;Port=10000;Schema=default;DefaultTable=events;UID=u;PWD=p;"

    def test_hive_dsn_only_is_verbatim(self):
        """Test that a DSN-only Hive string comes back unchanged."""
        d = ConnectionDescriptor("DSN=HiveProd;", HIVE)

        assert d.is_dsn_only is True
        assert d.to_string() == "DSN=HiveProd;"

    def test_hive_dsn_with_credentials(self):
        d = ConnectionDescriptor("DSN=HiveProd;UID=u;PWD=p;", HIVE)

        assert d.is_dsn_only is True
        assert d.to_string() == "DSN=HiveProd;UID=u;PWD=p;"

    def test_unknown_provider_yields_empty_string(self):
        assert ConnectionDescriptor("Server=x", "oracle.dataaccess").to_string() == ""

    def test_password_masking(self):
        d = ConnectionDescriptor("Server=sql01;Uid=u;Pwd=secret", SQL_SERVER)

        masked = d.to_string(mask_password=True)
        assert "secret" not in masked
        assert "Password=****;" in masked
        assert str(d) == d.to_string()

    def test_masking_leaves_empty_password_empty(self):
        d = ConnectionDescriptor("Server=sql01", SQL_SERVER)
        assert "Password=;" in d.to_string(mask_password=True)


class TestRoundTrip:
    """A descriptor survives a trip through its own dialect."""

    FULL = (
        "Data Source=srv;Initial Catalog=db;User ID=u;Password=p;Port=1234;"
        "Driver=Drv;DefaultTable=t;Encrypt=yes;App=audit;"
    )

    @pytest.mark.parametrize("provider_id", KNOWN_PROVIDERS)
    def test_full_round_trip(self, provider_id):
        original = ConnectionDescriptor(self.FULL, provider_id)
        again = ConnectionDescriptor(original.to_string(), provider_id)

        assert again == original
        assert again.as_dict() == original.as_dict()

    @pytest.mark.parametrize("provider_id", KNOWN_PROVIDERS)
    def test_minimal_round_trip(self, provider_id):
        original = ConnectionDescriptor("Server=x", provider_id)
        again = ConnectionDescriptor(original.to_string(), provider_id)

        assert again == original

    def test_hive_dsn_round_trip(self):
        original = ConnectionDescriptor("DSN=HiveProd;UID=u;PWD=p;", HIVE)
        assert ConnectionDescriptor(original.to_string(), HIVE) == original

    def test_different_providers_are_not_equal(self):
        assert ConnectionDescriptor("Server=x", SQL_SERVER) != ConnectionDescriptor("Server=x", MYSQL)
