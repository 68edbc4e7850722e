"""Car-wash POS backend: cart, checkout, inventory and appointments over Supabase"""
