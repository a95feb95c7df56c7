from flask import current_app


def get_booking_workflow():
    return current_app.extensions["booking_workflow"]


def get_contact_intake():
    return current_app.extensions["contact_intake"]
