# Order board: optimistic Kanban state for order status tracking
#
# Components:
#   schema.py   - Data model (OrderStatus, Card, BoardState, Order)
#   board.py    - Pure reconciler (initialize, move_card, rollback, advance_card)
#   session.py  - Per-view board session: optimistic moves, remote confirmation, rollback
#   events.py   - Event bridge for UI notifications
#   remote.py   - HTTP order feed and status update collaborators
#   config.py   - YAML / environment configuration
#   errors.py   - Error taxonomy
