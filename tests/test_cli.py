def test_reconcile_intent_creates_booking_once(app, gateway, notifier):
    gateway.add_intent("pi_lost", metadata={"booking_id": "b-lost", "customer_email": "a@b.com",
                                            "service_type": "airport-transfer"})
    runner = app.test_cli_runner()

    first = runner.invoke(args=["reconcile-intent", "pi_lost"])
    second = runner.invoke(args=["reconcile-intent", "pi_lost"])

    assert "Booking b-lost created for pi_lost" in first.output
    assert "Booking b-lost already exists for pi_lost" in second.output
    assert len(app.extensions["booking_workflow"].list_bookings()) == 1
    assert len(notifier.bookings) == 1


def test_reconcile_intent_skips_unpaid(app, gateway):
    gateway.add_intent("pi_open", status="requires_payment_method")

    result = app.test_cli_runner().invoke(args=["reconcile-intent", "pi_open"])

    assert "nothing to do" in result.output
    assert app.extensions["booking_workflow"].list_bookings() == []


def test_list_bookings_command(app, gateway):
    gateway.add_intent("pi_paid", metadata={"booking_id": "b-1", "customer_email": "a@b.com"})
    app.extensions["booking_workflow"].confirm_booking("pi_paid", {})

    result = app.test_cli_runner().invoke(args=["list-bookings"])

    assert "b-1" in result.output
    assert "pi_paid" in result.output
