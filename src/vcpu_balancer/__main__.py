from vcpu_balancer.cli.balancer import main

raise SystemExit(main())
