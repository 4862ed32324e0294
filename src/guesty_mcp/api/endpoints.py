"""Guesty Open API resource paths."""

LISTINGS = "/listings"
RESERVATIONS = "/reservations"
GUESTS = "/guests"
COMMUNICATIONS = "/communications"
