def of_type(outbound, event_type):
    return [item for item in outbound if item.type == event_type]


def wire(outbound):
    return [(item.recipient, item.as_wire()) for item in outbound]
