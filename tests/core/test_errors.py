"""Error Hierarchy — codes, HTTP mapping, and REST envelope."""

from crosspaths.core.errors import (
    CrossPathsError, DatabaseError, ErrorCategory, ErrorContext, ErrorSeverity,
    InvalidPairError, LookupFailure, PairUpdateFailure, UnsupportedDialectError,
    VenueConflictError, VenueNotFoundError, WriteFailure,
)


def test_all_errors_share_base():
    for err in (
        InvalidPairError("u"), VenueNotFoundError("x"), VenueConflictError("dup"),
        DatabaseError("down", "execute"), WriteFailure("fk"), LookupFailure("io"),
        PairUpdateFailure("reset"), UnsupportedDialectError("mysql"),
    ):
        assert isinstance(err, CrossPathsError)


def test_fatal_storage_errors_are_critical_503():
    for err in (WriteFailure("fk"), LookupFailure("io")):
        assert err.http_status == 503
        assert err.severity is ErrorSeverity.CRITICAL
        assert err.category is ErrorCategory.DATABASE


def test_pair_update_failure_is_a_warning():
    err = PairUpdateFailure("reset")
    assert err.code == "PAIR_UPDATE_FAILED"
    assert err.severity is ErrorSeverity.WARNING


def test_venue_not_found_is_404():
    err = VenueNotFoundError("Cafe Z")
    assert err.http_status == 404
    assert err.code == "RESOURCE_NOT_FOUND"
    assert "Cafe Z" in err.message


def test_to_response_envelope_includes_context():
    err = WriteFailure(
        "IntegrityError", ErrorContext(user_id="u1", venue_id="cafe-a", pair=("a", "b")),
    )
    body = err.to_response()["error"]
    assert body["code"] == "VISIT_WRITE_FAILED"
    assert body["category"] == "database"
    assert body["severity"] == "critical"
    assert body["context"]["user_id"] == "u1"
    assert body["context"]["venue_id"] == "cafe-a"
    assert body["context"]["pair"] == ["a", "b"]


def test_to_response_without_pair():
    body = InvalidPairError("u1").to_response()["error"]
    assert body["context"]["pair"] is None
